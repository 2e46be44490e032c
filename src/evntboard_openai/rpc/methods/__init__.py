"""RPC method handlers."""

from evntboard_openai.rpc.methods.assistants import register_assistant_methods
from evntboard_openai.rpc.methods.images import register_image_methods

__all__ = [
    "register_assistant_methods",
    "register_image_methods",
]

"""Assistants API RPC method handlers.

Each handler is a pass-through to ``client.beta``: it picks its params,
makes one OpenAI call and returns the result as JSON-compatible data.
Provider errors propagate and become JSON-RPC error responses.
"""

import logging
from typing import TYPE_CHECKING, Any

from evntboard_openai.provider import dump_result

if TYPE_CHECKING:
    from evntboard_openai.provider import OpenAIProvider
    from evntboard_openai.rpc.session import RPCSession

logger = logging.getLogger(__name__)


def register_assistant_methods(
    session: "RPCSession",
    provider: "OpenAIProvider",
) -> None:
    """Register assistant, thread, message and run methods.

    Args:
        session: RPC session to register methods on.
        provider: OpenAI provider configured with the hub's API key.
    """

    async def get_assistants(params: dict[str, Any]) -> dict[str, Any]:
        """List all assistants."""
        page = await provider.client.beta.assistants.list()
        return dump_result(page)

    async def get_assistant(params: dict[str, Any]) -> dict[str, Any]:
        """Fetch one assistant."""
        assistant = await provider.client.beta.assistants.retrieve(
            params["assistantId"]
        )
        return dump_result(assistant)

    async def create_thread(params: dict[str, Any]) -> dict[str, Any]:
        """Create a thread seeded with messages."""
        thread = await provider.client.beta.threads.create(
            messages=params.get("messages") or []
        )
        logger.info("thread_created", extra={"thread_id": thread.id})
        return dump_result(thread)

    async def add_message(params: dict[str, Any]) -> dict[str, Any]:
        """Append a message to a thread."""
        message = await provider.client.beta.threads.messages.create(
            params["threadId"],
            role=params.get("role") or "user",
            content=params["content"],
        )
        return dump_result(message)

    async def run_thread(params: dict[str, Any]) -> dict[str, Any]:
        """Start a run of a thread against an assistant."""
        kwargs: dict[str, Any] = {"assistant_id": params["assistant_id"]}
        if params.get("additional_instructions") is not None:
            kwargs["additional_instructions"] = params["additional_instructions"]

        run = await provider.client.beta.threads.runs.create(
            params["threadId"], **kwargs
        )
        logger.info(
            "run_started",
            extra={"thread_id": params["threadId"], "run_id": run.id},
        )
        return dump_result(run)

    async def get_run_status(params: dict[str, Any]) -> dict[str, Any]:
        """Fetch the current state of a run."""
        run = await provider.client.beta.threads.runs.retrieve(
            params["runId"], thread_id=params["threadId"]
        )
        return dump_result(run)

    async def get_run_steps(params: dict[str, Any]) -> dict[str, Any]:
        page = await provider.client.beta.threads.runs.steps.list(
            params["runId"], thread_id=params["threadId"]
        )
        return dump_result(page)

    async def get_messages(params: dict[str, Any]) -> dict[str, Any]:
        page = await provider.client.beta.threads.messages.list(params["threadId"])
        return dump_result(page)

    async def get_message(params: dict[str, Any]) -> dict[str, Any]:
        message = await provider.client.beta.threads.messages.retrieve(
            params["messageId"], thread_id=params["threadId"]
        )
        return dump_result(message)

    async def get_runs(params: dict[str, Any]) -> dict[str, Any]:
        page = await provider.client.beta.threads.runs.list(params["threadId"])
        return dump_result(page)

    async def submit_tool_outputs(params: dict[str, Any]) -> dict[str, Any]:
        """Submit tool call outputs so a run waiting on them can continue."""
        run = await provider.client.beta.threads.runs.submit_tool_outputs(
            params["runId"],
            thread_id=params["threadId"],
            tool_outputs=params["outputs"],
        )
        return dump_result(run)

    # Register handlers
    session.register("getAssistants", get_assistants)
    session.register("getAssistant", get_assistant)
    session.register("createThread", create_thread)
    session.register("addMessage", add_message)
    session.register("runThread", run_thread)
    session.register("getRunStatus", get_run_status)
    session.register("getRunSteps", get_run_steps)
    session.register("getMessages", get_messages)
    session.register("getMessage", get_message)
    session.register("getRuns", get_runs)
    session.register("submitToolOutputs", submit_tool_outputs)

    logger.debug("Registered assistant RPC methods")

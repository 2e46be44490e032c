"""Configuration models using Pydantic."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_MODULE_CODE = "openai"

# Largest hub frame accepted, in bytes. Vision requests carry images inline.
DEFAULT_MAX_FRAME_SIZE = 100 * 1024 * 1024


class ConfigError(Exception):
    """Configuration error."""

    pass


class ModuleIdentity(BaseModel):
    """Identity this module registers with on the hub."""

    model_config = ConfigDict(frozen=True)

    code: str = DEFAULT_MODULE_CODE
    name: str = Field(min_length=1)
    token: SecretStr

    def to_register_params(self) -> dict[str, Any]:
        """Params for ``session.register``. The only place the token is revealed."""
        return {
            "code": self.code,
            "name": self.name,
            "token": self.token.get_secret_value(),
        }


class OpenAIConfig(BaseModel):
    """Model selection for the OpenAI-backed methods.

    The API key is not configured here; the hub supplies it on registration.
    """

    vision_model: str = "gpt-4o"
    vision_max_tokens: int = Field(default=1024, gt=0)
    image_model: str = "dall-e-3"
    # Random queue id per dalle call instead of the shared name-based one
    unique_queue_ids: bool = False


class ModuleConfig(BaseModel):
    """Root configuration model."""

    host: str = Field(min_length=1)
    module: ModuleIdentity
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    max_frame_size: int | None = Field(default=DEFAULT_MAX_FRAME_SIZE, gt=0)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

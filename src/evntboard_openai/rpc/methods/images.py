"""Vision and image generation RPC method handlers."""

import logging
from typing import TYPE_CHECKING, Any

from evntboard_openai.provider import dump_result
from evntboard_openai.queue import QUEUE_EVENT, QueueState, new_queue_id
from evntboard_openai.rpc.session import InvalidParamsError

if TYPE_CHECKING:
    from evntboard_openai.config import ModuleConfig
    from evntboard_openai.provider import OpenAIProvider
    from evntboard_openai.rpc.session import RPCSession

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_COUNT = 1
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_QUALITY = "standard"


def build_vision_messages(
    prompt: str,
    image: str,
    additional_instructions: str | None = None,
) -> list[dict[str, Any]]:
    """Chat messages for a single-shot image + text completion.

    ``image`` is anything the API accepts as an image URL, including
    ``data:`` URLs.
    """
    messages: list[dict[str, Any]] = []
    if additional_instructions:
        messages.append({"role": "system", "content": additional_instructions})
    messages.append(
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image}},
            ],
        }
    )
    return messages


def register_image_methods(
    session: "RPCSession",
    provider: "OpenAIProvider",
    config: "ModuleConfig",
) -> None:
    """Register the vision and dalle methods.

    Args:
        session: RPC session to register methods on. Also used to notify the
            hub when queued generations finish.
        provider: OpenAI provider configured with the hub's API key.
        config: Module configuration (models, module code).
    """
    module_code = config.module.code

    async def vision(params: dict[str, Any]) -> dict[str, Any]:
        """Describe an image according to a prompt."""
        completion = await provider.client.chat.completions.create(
            model=config.openai.vision_model,
            messages=build_vision_messages(  # type: ignore[arg-type]
                params["prompt"],
                params["image"],
                params.get("additional_instructions"),
            ),
            max_tokens=config.openai.vision_max_tokens,
        )
        return dump_result(completion)

    async def publish(state: QueueState) -> None:
        if session.is_closed:
            logger.warning(
                "queue_notification_dropped",
                extra={"queue_id": str(state.id), "state": state.state},
            )
            return
        try:
            await session.notify(QUEUE_EVENT, state.event(module_code))
        except Exception:
            logger.warning(
                "queue_notification_failed",
                extra={"queue_id": str(state.id), "state": state.state},
                exc_info=True,
            )

    async def generate(state: QueueState, request: dict[str, Any]) -> None:
        try:
            response = await provider.client.images.generate(**request)
        except Exception as e:
            logger.exception(
                "image_generation_failed", extra={"queue_id": str(state.id)}
            )
            state.state = "failed"
            state.error = str(e)
        else:
            state.state = "completed"
            state.output = [image.url for image in response.data or [] if image.url]
            logger.info(
                "image_generation_completed",
                extra={"queue_id": str(state.id), "images": len(state.output)},
            )
        await publish(state)

    async def dalle(params: dict[str, Any]) -> dict[str, Any]:
        """Queue an image generation and answer with its queue token.

        The result arrives later as an ``event.new`` notification.
        """
        # Fail now rather than in the background when there is no key
        _ = provider.client

        try:
            count = int(params.get("n") or DEFAULT_IMAGE_COUNT)
        except (TypeError, ValueError):
            raise InvalidParamsError(
                f"n must be an integer, got {params['n']!r}"
            ) from None

        request = {
            "model": config.openai.image_model,
            "prompt": params["prompt"],
            "n": count,
            "size": params.get("size") or DEFAULT_IMAGE_SIZE,
            "quality": params.get("quality") or DEFAULT_IMAGE_QUALITY,
        }
        state = QueueState(id=new_queue_id(unique=config.openai.unique_queue_ids))
        token = state.token()

        session.spawn(generate(state, request))
        logger.info("image_generation_queued", extra={"queue_id": str(state.id)})
        return token

    # Register handlers
    session.register("vision", vision)
    session.register("dalle", dalle)

    logger.debug("Registered image RPC methods")

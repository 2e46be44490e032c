"""Queue tokens for asynchronous image generation.

A ``dalle`` call answers immediately with a queue token and reports the
outcome later through an ``event.new`` notification carrying the same id.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Literal

QueueStateName = Literal["in_progress", "completed", "failed"]

QUEUE_NAMESPACE = uuid.NAMESPACE_URL

# Name-based id, so every dalle call in every process shares it. Hub-side
# consumers key on this value; set unique queue ids in config to get uuid4.
DALLE_QUEUE_ID = uuid.uuid5(QUEUE_NAMESPACE, "dalle")

QUEUE_EVENT = "event.new"


def new_queue_id(*, unique: bool = False) -> uuid.UUID:
    return uuid.uuid4() if unique else DALLE_QUEUE_ID


def queue_event_name(module_code: str) -> str:
    return f"{module_code}-queue-state-changed"


@dataclass(slots=True)
class QueueState:
    """State of one queued generation."""

    id: uuid.UUID
    state: QueueStateName = "in_progress"
    output: list[str] = field(default_factory=list)
    error: str | None = None

    def token(self) -> dict[str, Any]:
        """Immediate answer to the caller that queued the work."""
        return {
            "type": "queue",
            "message": {"state": self.state, "id": str(self.id)},
        }

    def event(self, module_code: str) -> dict[str, Any]:
        """Params of the ``event.new`` notification announcing this state."""
        payload: dict[str, Any] = {"id": str(self.id), "state": self.state}
        if self.state == "completed":
            payload["output"] = list(self.output)
        if self.error is not None:
            payload["error"] = self.error
        return {"name": queue_event_name(module_code), "payload": payload}

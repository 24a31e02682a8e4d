from typing import Literal, Optional

from pydantic import BaseModel

from listings import config
from listings.ee import EventEmitter


class StatusMessage(BaseModel):
    text: str
    duration: float
    politeness: Literal["polite", "assertive"] = "polite"


class Announcer:
    """Emits transient user-facing status messages on an event bus.

    Each message says how long it should stay visible; removing it is up to
    whoever displays it.
    """

    event = "announce"

    def __init__(self, bus: EventEmitter, *, duration: Optional[float] = None):
        self.bus = bus
        self.duration = config.ANNOUNCE_DURATION if duration is None else duration

    def announce(self, text: str, *, duration: Optional[float] = None) -> StatusMessage:
        message = StatusMessage(
            text=text,
            duration=self.duration if duration is None else duration,
        )
        self.bus.emit(self.event, message)
        return message


def results_message(count: int) -> str:
    return f"Showing {count} job listing{'' if count == 1 else 's'}"


__all__ = ["Announcer", "StatusMessage", "results_message"]

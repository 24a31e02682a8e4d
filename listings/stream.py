import json
import logging
from typing import Any, Callable

from listings.announce import Announcer, StatusMessage
from listings.render import render_regions
from listings.sessions import Session

logger = logging.getLogger(__name__)


def format_event(event: str, data: Any) -> str:
    """Encode one Server-Sent Events frame."""
    payload = data if isinstance(data, str) else json.dumps(data)
    return f"event: {event}\ndata: {payload}\n\n"


def attach(session: Session) -> Callable[[], None]:
    """Forward the view's updates and status messages into its stream queue.

    The current regions are queued straight away, so a stream that connects
    after a change still starts in sync. Returns a function that undoes the
    subscription.
    """
    controller = session.controller
    bus = controller.bus

    def push_results():
        regions = render_regions(controller, csrf_token=session.csrf_token)
        session.stream.put_nowait(format_event("results", regions.model_dump()))

    def push_announcement(message: StatusMessage):
        session.stream.put_nowait(format_event("announce", message.model_dump()))

    bus.on("update", push_results)
    bus.on(Announcer.event, push_announcement)
    push_results()

    def detach():
        bus.off("update", push_results)
        bus.off(Announcer.event, push_announcement)

    return detach


__all__ = ["attach", "format_event"]

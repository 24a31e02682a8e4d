import uuid
import asyncio
import logging
import time
import threading
from contextlib import asynccontextmanager
from typing import Optional
from pydantic import BaseModel
from fastapi import FastAPI, HTTPException
from listings import config
from listings.controller import ListingController

logger = logging.getLogger(__name__)


class Session(BaseModel):
    """One page view: its controller plus the queue feeding its event stream."""

    controller: ListingController
    csrf_token: str
    stream: asyncio.Queue[str]
    last_seen: int = 0
    model_config = {
        "arbitrary_types_allowed": True
    }


sessions: dict[str, Session] = {}
# the sweep thread and request handlers both change the map
_sessions_lock = threading.Lock()


async def create_session(*, source: Optional[str] = None) -> str:
    controller = ListingController()
    await controller.start(source)
    session_id = str(uuid.uuid4())
    session = Session(
        controller=controller,
        csrf_token=uuid.uuid4().hex,
        stream=asyncio.Queue(),
        last_seen=int(time.time()),
    )
    with _sessions_lock:
        sessions[session_id] = session
    logger.info("Created session %s (%s)", session_id, controller.state.value)
    return session_id


def get_session(*, session_id: Optional[str]) -> Session:
    session = sessions.get(session_id) if session_id else None
    if session is None:
        raise HTTPException(status_code=400, detail="Invalid Session")
    return session


def drop_session(*, session_id: Optional[str]) -> None:
    if not session_id:
        return
    with _sessions_lock:
        dropped = sessions.pop(session_id, None)
    if dropped is not None:
        logger.info("Dropped session %s", session_id)


def touch_session(*, session_id: str) -> None:
    session = get_session(session_id=session_id)
    session.last_seen = int(time.time())


def expire_sessions(now: Optional[float] = None) -> list[str]:
    now = time.time() if now is None else now
    with _sessions_lock:
        snapshot = list(sessions.items())
    expired = [
        sid for sid, session in snapshot
        if now - session.last_seen > config.SESSION_TTL
    ]
    for sid in expired:
        logger.info("Removing inactive session: %s", sid)
        with _sessions_lock:
            sessions.pop(sid, None)
    return expired


def cleanup_sessions_loop():
    while True:
        expire_sessions()
        time.sleep(config.CLEANUP_INTERVAL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    thread = threading.Thread(target=cleanup_sessions_loop, daemon=True)
    thread.start()
    logger.info("Session cleanup thread started")

    yield

    logger.info("Application shutting down")

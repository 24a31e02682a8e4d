"""
Job listings board – FastAPI application.

Routes:
  /                  Full page for a fresh view (filters start empty)
  /actions/{action}  POST – add-filter / remove-filter / clear-filters
  /events            GET  – SSE stream of re-rendered regions and status messages
  /static            Stylesheet, icons and the page script

Run with `job-listings-board` or `python app.py`.
"""

from fastapi import FastAPI, Request, Response, Form, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from typing import Optional
from contextlib import suppress
import asyncio
import logging
import uvicorn
from listings import config
from listings.controller import UnknownAction
from listings.csrf import CSRFMiddleware
from listings.render import render_page
from listings.sessions import create_session, drop_session, get_session, lifespan, touch_session
from listings.stream import attach, format_event

logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
logger = logging.getLogger(__name__)

app = FastAPI(lifespan=lifespan)

app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")
app.add_middleware(CSRFMiddleware)


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    # every page load is a new view; filters are never carried over
    drop_session(session_id=request.cookies.get("session_id"))
    session_id = await create_session(source=config.DATA_SOURCE)
    session = get_session(session_id=session_id)
    html = render_page(session.controller, csrf_token=session.csrf_token)
    response = HTMLResponse(content=html)
    response.set_cookie(
        key="session_id",
        value=session_id,
        httponly=True,
        samesite="strict",
        max_age=config.SESSION_TTL
    )
    return response


@app.post("/actions/{action}")
async def actions(
    request: Request,
    action: str,
    value: Optional[str] = Form(None)
):
    session_id = request.cookies.get("session_id")
    session = get_session(session_id=session_id)
    touch_session(session_id=session_id)
    controller = session.controller

    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        data = await request.json()
        if not isinstance(data, dict):
            raise HTTPException(status_code=422, detail="Expected a JSON object")
        value = data.get("value")
    elif not content_type.startswith("application/x-www-form-urlencoded"):
        return JSONResponse({"error": "Unsupported Content-Type"}, status_code=415)

    if value is not None and not isinstance(value, str):
        raise HTTPException(status_code=422, detail="value must be a string")
    try:
        controller.dispatch(action, value)
    except UnknownAction:
        logger.warning("Rejected unknown action %r", action)
        raise HTTPException(status_code=404, detail=f"Unknown action: {action}") from None

    if content_type.startswith("application/json"):
        return Response(status_code=204)
    return HTMLResponse(content=render_page(controller, csrf_token=session.csrf_token))


@app.get("/events")
async def events(request: Request):
    session_id = request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session ID")
    session = get_session(session_id=session_id)
    touch_session(session_id=session_id)
    queue = session.stream

    async def keep_alive():
        while True:
            await asyncio.sleep(config.SSE_PING_INTERVAL)
            if await request.is_disconnected():
                return
            queue.put_nowait(format_event("ping", "ping"))

    async def event_stream():
        yield "retry: 10000\n" + format_event("ping", "connected")

        try:
            while True:
                message = await queue.get()
                yield message
                if await request.is_disconnected():
                    break

        finally:
            detach()
            ping_task.cancel()
            with suppress(asyncio.CancelledError):
                await ping_task

    detach = attach(session)
    ping_task = asyncio.create_task(keep_alive())

    return StreamingResponse(event_stream(), media_type="text/event-stream")


def main():
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()

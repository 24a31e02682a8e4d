from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from fastapi.responses import JSONResponse
from fastapi import HTTPException, status

from listings.sessions import get_session

UNSAFE_METHODS = ("POST", "PUT", "PATCH", "DELETE")
CSRF_HEADER = "x-csrf-token"
CSRF_FIELD = "_csrf"


def _forbidden(detail: str) -> JSONResponse:
    return JSONResponse({"detail": detail}, status_code=status.HTTP_403_FORBIDDEN)


class CSRFMiddleware(BaseHTTPMiddleware):
    """Rejects mutating requests that don't carry the view's CSRF token."""

    async def dispatch(self, request: Request, call_next):
        if request.method not in UNSAFE_METHODS:
            return await call_next(request)

        session_id = request.cookies.get("session_id")
        if not session_id:
            return _forbidden("Missing session")
        try:
            session = get_session(session_id=session_id)
        except HTTPException:
            return _forbidden("Invalid session")

        content_type = request.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            actual_token = request.headers.get(CSRF_HEADER)
        elif content_type.startswith("application/x-www-form-urlencoded"):
            # cache the body first so the endpoint can parse the form again
            await request.body()
            form = await request.form()
            actual_token = form.get(CSRF_FIELD)
        else:
            actual_token = None

        if actual_token != session.csrf_token:
            return _forbidden("CSRF token invalid or missing")

        return await call_next(request)

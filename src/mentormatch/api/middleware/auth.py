"""JWT Bearer authentication middleware."""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from mentormatch.logging_config import bind_request_context
from mentormatch.services.security import decode_access_token

logger = logging.getLogger(__name__)

_ANONYMOUS = {"sub": "anonymous", "role": None}


class AuthMiddleware(BaseHTTPMiddleware):
    """Validate a Bearer token and attach the identity to request.state.user.

    Routes enforce authentication themselves through ``get_current_actor``;
    the SSE stream also accepts the token as an ``access_token`` query param
    because EventSource cannot send headers.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        auth_header = request.headers.get("authorization", "")
        token = None
        if auth_header.startswith("Bearer "):
            token = auth_header[7:]
        elif request.url.path.endswith("/stream/events"):
            token = request.query_params.get("access_token")

        user = self._validate(token) if token else dict(_ANONYMOUS)
        request.state.user = user
        if "_auth_error" in user:
            logger.info("Rejected bearer token (path=%s)", request.url.path)
        elif user.get("role"):
            bind_request_context(user_id=user["sub"], role=user["role"])
        return await call_next(request)

    @staticmethod
    def _validate(token: str) -> dict:
        try:
            payload = decode_access_token(token)
        except ValueError:
            return {**_ANONYMOUS, "_auth_error": "Invalid or expired token"}
        return {"sub": payload.get("sub", ""), "role": payload.get("role")}

"""
ASGI middleware enforcing the request body ceiling.

The declared ``Content-Length`` is checked up front; chunked bodies, which
carry no length, are counted while they are received and cut off as soon as
they pass the ceiling.
"""
import logging

from starlette.datastructures import Headers
from starlette.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from src.errors import UploadTooLarge

logger = logging.getLogger(__name__)


class RequestBodyLimitMiddleware:
    """Rejects POST bodies larger than ``max_body_bytes`` with 400."""

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    def _too_large_message(self) -> str:
        return f"Request too large. Max size is {self.max_body_bytes >> 20}MB"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "POST":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None:
            try:
                length = int(content_length)
            except ValueError:
                logger.warning("POST %s - 400 Invalid Content-Length", path)
                await PlainTextResponse("Invalid Content-Length", status_code=400)(scope, receive, send)
                return
            if length > self.max_body_bytes:
                logger.warning("POST %s - 400 Body of %d bytes exceeds %d", path, length, self.max_body_bytes)
                await PlainTextResponse(self._too_large_message(), status_code=400)(scope, receive, send)
                return

        received = 0
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    logger.warning("POST %s - 400 Body exceeds %d bytes", path, self.max_body_bytes)
                    raise UploadTooLarge(self._too_large_message())
            return message

        async def tracking_send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, tracking_send)
        except UploadTooLarge as exc:
            # Normally the app's error handler already answered
            if response_started:
                raise
            await PlainTextResponse(exc.message, status_code=exc.status_code)(scope, receive, send)

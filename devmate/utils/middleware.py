import logging

from fastapi.responses import JSONResponse
from starlette.datastructures import Headers

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """
    ASGI middleware capping inbound request bodies.

    The declared Content-Length is checked first. The body is then read
    chunk by chunk and the request is refused with 413 as soon as the
    running total passes the limit, so chunked uploads are capped too and
    at most ``max_bytes`` are ever held in memory. The buffered body is
    replayed to the application unchanged.
    """

    def __init__(self, app, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length is not None:
            try:
                declared = int(length)
            except ValueError:
                await self._reject(scope, receive, send, 400, "Invalid Content-Length header")
                return
            if declared > self.max_bytes:
                await self._reject(scope, receive, send, 413, "Request body too large")
                return

        chunks = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body = message.get("body", b"")
            received += len(body)
            if received > self.max_bytes:
                await self._reject(scope, receive, send, 413, "Request body too large")
                return
            chunks.append(body)
            more_body = message.get("more_body", False)

        body = b"".join(chunks)
        replayed = False

        async def replay():
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": body, "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope, receive, send, status_code: int, error: str):
        logger.info(f"Rejected request to {scope.get('path', '')}: {error}")
        response = JSONResponse(status_code=status_code, content={"error": error})
        await response(scope, receive, send)

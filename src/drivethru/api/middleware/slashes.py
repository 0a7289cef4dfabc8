"""
Trailing slash middleware.

Install scripts request ``/download/<name>/<os>/<arch>/``. Stripping the
trailing slash before routing lets those URLs match the routes directly
instead of answering with a redirect.
"""

from starlette.types import ASGIApp, Receive, Scope, Send


class StripSlashesMiddleware:
    """Pure ASGI middleware that removes trailing slashes from request paths."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path = scope["path"]
            if len(path) > 1 and path.endswith("/"):
                scope = dict(scope)
                scope["path"] = path.rstrip("/") or "/"
                raw_path = scope.get("raw_path")
                if raw_path:
                    scope["raw_path"] = raw_path.rstrip(b"/") or b"/"
        await self.app(scope, receive, send)

"""Greeting routes.

Endpoints, relative to the mount prefix:
- GET /          -> "Hello, World!" (also answered without the trailing slash)
- GET /{name}    -> "Hello, <name>", where name is one raw path segment
"""
from __future__ import annotations
import logging
from urllib.parse import quote, unquote

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import PlainTextResponse

from welcome_server.common.config import normalize_prefix
from welcome_server.common.schema import GreetingRequest, GreetingResponse
from welcome_server.common.templates import ROOT_GREETING, render_greeting

LOGGER = logging.getLogger("welcome.serve.router")


def raw_segment(request: Request, name: str) -> str | None:
    """
    Resolve the name from the last segment of the undecoded request path.

    Starlette matches routes on the decoded path, so "a%2Fb" arrives as
    "a/b" and looks like two segments. Splitting the raw path first keeps an
    encoded slash inside the name. One trailing slash is ignored.

    Args:
        request: Incoming request.
        name: Decoded remainder of the path after the mount prefix.

    Returns:
        The decoded segment, or None if the path spans several segments.
    """
    raw = request.scope.get("raw_path")
    path = raw.decode("utf-8", "replace") if raw else quote(name)
    if path.endswith("/") and name.endswith("/"):
        path, name = path[:-1], name[:-1]
    segment = unquote(path.rsplit("/", 1)[-1])
    if not segment or segment != name:
        return None
    return segment


class GreetingRouter:
    """Stateless pair of greeting handlers that can be mounted on a FastAPI app.

    The name is echoed verbatim by default. Served as text/plain that is
    harmless, but it is a reflected-injection vector if the body is ever
    rendered as markup; pass ``escape=True`` to HTML-escape it.
    """

    def __init__(self, escape: bool = False) -> None:
        self.escape = escape

    def handle_root(self, request: GreetingRequest) -> GreetingResponse:
        return GreetingResponse(body=ROOT_GREETING)

    def handle_named(self, request: GreetingRequest) -> GreetingResponse:
        if request.name is None:
            raise ValueError("handle_named requires a request with a name")
        return GreetingResponse(body=render_greeting(request.name, escape=self.escape))

    def handle(self, request: GreetingRequest) -> GreetingResponse:
        if request.is_named:
            return self.handle_named(request)
        return self.handle_root(request)

    def api_router(self, bare_root: bool = False) -> APIRouter:
        """
        Build the FastAPI router for the greeting handlers.

        Args:
            bare_root: Also answer the prefix itself without a trailing slash.
                Only valid when the router is included under a non-empty prefix.
        """
        router = APIRouter(tags=["welcome"])

        def welcome() -> str:
            return self.handle_root(GreetingRequest.absent()).body

        if bare_root:
            router.add_api_route("", welcome, methods=["GET"], response_class=PlainTextResponse)
        router.add_api_route("/", welcome, methods=["GET"], response_class=PlainTextResponse)

        @router.get("/{name:path}", response_class=PlainTextResponse)
        def welcome_name(name: str, request: Request) -> str:
            segment = raw_segment(request, name)
            if segment is None:
                raise HTTPException(status_code=404, detail="Not Found")
            return self.handle_named(GreetingRequest.present(segment)).body

        return router

    def mount(self, app: FastAPI, prefix: str = "/welcome") -> str:
        """
        Attach the greeting routes to ``app`` under ``prefix``.

        Returns:
            The normalized prefix the routes were mounted under.
        """
        prefix = normalize_prefix(prefix)
        app.include_router(self.api_router(bare_root=bool(prefix)), prefix=prefix)
        LOGGER.info("Mounted greeting routes under %s/ (escape=%s)", prefix, self.escape)
        return prefix

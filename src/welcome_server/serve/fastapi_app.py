"""FastAPI host for the greeting routes.

Endpoints:
- GET /health
- GET <prefix>/ and GET <prefix>/{name}, see welcome_server.serve.router
"""
from __future__ import annotations

from fastapi import FastAPI

from welcome_server.common.config import ServerConfig
from welcome_server.serve.router import GreetingRouter


def create_app(config: ServerConfig | None = None) -> FastAPI:
    """Build a FastAPI app with the greeting router mounted per ``config``."""
    config = config or ServerConfig()
    app = FastAPI(title="welcome-server")

    # registered before the greeting routes so a root mount cannot shadow it
    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "prefix": config.prefix or "/"}

    GreetingRouter(escape=config.escape).mount(app, config.prefix)
    return app

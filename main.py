"""
Workflow connectors — application entry point.
"""

from __future__ import annotations

import logging
import sys

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_middleware
from api.routes import router as api_router
from config.settings import config
from connectors.registry import ConnectorRegistry
from tools.registry import ToolRegistry
from utils.validators import validate_tools_for_connectors

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("httpcore", "httpx"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Workflow Connectors",
        version="1.0.0",
        description="Jobber and Reform actions and prop options for workflows.",
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)

    # Routes
    app.include_router(api_router, prefix="/api/v1")

    @app.on_event("startup")
    async def on_startup():
        logger.info("Discovering connectors…")
        connectors = ConnectorRegistry()
        connectors.discover()

        logger.info("Discovering tools…")
        registry = ToolRegistry()
        registry.auto_discover_tools()

        logger.info("Validating tool ↔ connector bindings…")
        validate_tools_for_connectors(registry, connectors)

        approval_tools = [t for t in registry.list_tools() if registry.tool_requires_approval(t)]
        if approval_tools:
            logger.info("Approval-protected tools: %s", approval_tools)

        logger.info("Application ready to accept requests.")

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )

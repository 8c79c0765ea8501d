"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.config import Config
from orchestrator.core import ChatOrchestrator, create_orchestrator
from server.errors import register_exception_handlers
from server.middleware import RequestIDMiddleware
from server.routes import chat, health
from utils.logger import get_logger

logger = get_logger(__name__)


def _build_lifespan(orchestrator: ChatOrchestrator | None):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Construct collaborators once at startup."""
        logger.info("FastAPI server starting up")

        if orchestrator is not None:
            app.state.orchestrator = orchestrator
        else:
            config = Config()
            problems = config.validate()
            if problems:
                logger.warning(
                    "Configuration incomplete; chat endpoints disabled",
                    extra={"extra_fields": {"problems": problems}},
                )
                app.state.orchestrator = None
            else:
                app.state.orchestrator = create_orchestrator(config)

        yield

        logger.info("FastAPI server shutting down")

    return lifespan


def create_app(orchestrator: ChatOrchestrator | None = None) -> FastAPI:
    """
    Factory function to create FastAPI application.

    Args:
        orchestrator: Pre-built orchestrator (tests); built from env when omitted
    """
    app = FastAPI(
        title="Grounded Chat API",
        description="Chat answers grounded in the content of a linked web page",
        version="1.0.0",
        lifespan=_build_lifespan(orchestrator),
    )
    app.state.orchestrator = orchestrator

    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(chat.router)

    return app

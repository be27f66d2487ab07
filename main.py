from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskboard.application.jobs import JobRunner
from taskboard.config import get_settings
from taskboard.infrastructure.database import SessionLocal, engine, initialize_database
from taskboard.infrastructure.email import SendGridChannel
from taskboard.infrastructure.scheduler import shutdown_scheduler, start_scheduler
from taskboard.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and start the scheduling jobs; stop them on shutdown."""

    initialize_database()
    settings = get_settings()
    runner = JobRunner(
        SessionLocal,
        SendGridChannel(),
        grace_minutes=settings.reminder_grace_minutes,
    )
    start_scheduler(runner, settings)
    yield
    shutdown_scheduler()
    engine.dispose()


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""

    app = FastAPI(title="Taskboard", lifespan=lifespan)

    # Allow requests from the web client during local development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()

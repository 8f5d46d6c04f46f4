"""Main FastAPI application."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.dependencies import build_controller
from api.routes import session
from core.logging_setup import setup_console_logging

setup_console_logging()

app = FastAPI(title="Study Quiz API")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

# One session per process; multi-user sessions are out of scope.
app.state.controller = build_controller()


@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


# Include routers
app.include_router(session.router)

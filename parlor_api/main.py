"""FastAPI application entry point."""

from fastapi import FastAPI

from config import config
from parlor_api.routes import profiles

app = FastAPI(
    title="Blackjack Parlor",
    description="Player profile and achievement API",
    version="0.1.0",
    debug=config.api.debug,
)


@app.get("/api/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


app.include_router(profiles.router, prefix="/api", tags=["profiles"])

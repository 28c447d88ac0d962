from fastapi import FastAPI
from dotenv import load_dotenv

# Load env early
load_dotenv()
from .config import settings
from .logging_config import configure_logging
from .routes.health import router as health_router
from .routes.mcp import router as mcp_router


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Game Analytics MCP", version=settings.server_version)

    # Routers
    app.include_router(health_router, prefix="/health", tags=["health"])
    app.include_router(mcp_router, prefix="/mcp", tags=["mcp"])

    return app

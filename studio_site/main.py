"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .packs import PackMounter
from .utils.logger import logger


def create_app(mounter: Optional[PackMounter] = None) -> FastAPI:
    """Create the site API with every discoverable gizmo pack mounted.

    Args:
        mounter: Pack mounter. Defaults to one over the conventional directories

    Returns:
        Configured FastAPI app
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting Studio Site API")
        app.state.packs = (mounter or PackMounter()).mount_all(app)
        yield
        logger.info("Shutting down Studio Site API")

    app = FastAPI(
        title="Studio Site API",
        description="Site server with auto-mounted gizmo packs",
        version="1.0.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint.

        Returns:
            Health status
        """
        return {"status": "healthy", "service": "studio-site"}

    @app.get("/")
    async def root():
        """Root endpoint.

        Returns:
            Welcome message with mounted packs
        """
        packs = getattr(app.state, "packs", None)
        return {
            "message": "Studio Site API",
            "version": "1.0.0",
            "health": "/health",
            "packs": list(packs.mounted) if packs else [],
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "studio_site.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info",
    )

"""FastAPI main application."""

import logging
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.errors import TopologyError
from ..core.layout import compute_layout
from ..core.models import LayoutResult


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Route structlog through stdlib logging with the configured renderer."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Fleet Topology Layout API",
    description="Force-directed positions for server/project topology graphs",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class LayoutRequest(BaseModel):
    """Topology to lay out, as returned by the topology endpoint.

    Records stay loosely typed so the engine can skip unusable nodes and
    drop incomplete edges instead of rejecting the whole request.
    """

    nodes: List[Dict[str, Any]] = Field(..., description="Servers and projects")
    edges: List[Dict[str, Any]] = Field(default_factory=list, description="Project -> server relations")
    options: Optional[Dict[str, Any]] = Field(
        None, description="Overrides for canvas, seeding and force parameters"
    )


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Fleet Topology Layout API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/layout", response_model=LayoutResult)
def layout_topology(request: LayoutRequest):
    """
    Compute node positions for a topology graph.

    Declared as a plain function so FastAPI runs the CPU-bound simulation in
    its worker thread pool rather than on the event loop.
    """
    if len(request.nodes) > settings.max_nodes:
        raise HTTPException(
            status_code=413,
            detail=f"Topology has {len(request.nodes)} nodes, limit is {settings.max_nodes}",
        )

    logger.info("Layout requested", nodes=len(request.nodes), edges=len(request.edges))

    try:
        return compute_layout(request.nodes, request.edges, request.options)
    except TopologyError as e:
        logger.warning("Layout rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)

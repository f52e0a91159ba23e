"""FastAPI application - Locator Service.

Exposes the location matrix over HTTP: resolve location types to URLs,
identify the location a URL belongs to, and inspect or change the ambient
resolution context.  Handlers are async so the matrix is only ever touched
from the event loop thread.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import Config
from .errors import LocatorError
from .locations.types import LocationContext, LocationDescriptor
from .matrix.matrix import LocatorMatrix


logger = logging.getLogger(__name__)


# Response models
class LocationModel(BaseModel):
    type_id: str
    uri: str
    full_uri: str | None = None
    parent_id: str | None = None
    data_center_id: str | None = None
    residency: str | None = None
    environment: str | None = None
    aliases: list[str] = []
    product_type: str | None = None
    aspect: str | None = None
    ui_caption: str | None = None


class ContextModel(BaseModel):
    environment: str | None = None
    residency: str | None = None
    data_center_id: str | None = None
    accessible: list[str] | None = None


class ResolveResponse(BaseModel):
    """Response from /resolve - the URL for a location type."""
    type_id: str
    url: str
    found: bool
    location: LocationModel | None = None
    context: ContextModel


class ActingUpdate(BaseModel):
    # A URL, true to auto-detect, or null/false to clear
    uri: str | bool | None = None


class ActingResponse(BaseModel):
    acting_uri: str | None = None
    location: LocationModel | None = None
    context: ContextModel


class LocationListResponse(BaseModel):
    locations: list[LocationModel]
    count: int


class HealthResponse(BaseModel):
    status: str
    locations: int
    context: ContextModel


# Global state (initialized at startup or via configure())
_matrix: LocatorMatrix | None = None


def configure(matrix: LocatorMatrix) -> None:
    """Install the matrix served by the route handlers."""
    global _matrix
    _matrix = matrix


def _get_matrix() -> LocatorMatrix:
    if _matrix is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _matrix


def _location_model(node: LocationDescriptor, matrix: LocatorMatrix) -> LocationModel:
    return LocationModel(
        type_id=node.type_id,
        uri=node.uri,
        full_uri=matrix.resolve_node_uri(node),
        parent_id=node.parent_id,
        data_center_id=node.data_center_id,
        residency=node.residency,
        environment=node.environment,
        aliases=list(node.aliases),
        product_type=node.product_type,
        aspect=node.aspect,
        ui_caption=node.ui_caption,
    )


def _context_model(context: LocationContext) -> ContextModel:
    return ContextModel(**context.to_dict())


def load_config() -> Config:
    """Load config from $LOCATOR_CONFIG (YAML or JSON), or use defaults."""
    path = os.environ.get("LOCATOR_CONFIG")
    if not path:
        return Config()
    if path.endswith(".json"):
        return Config.from_json(path)
    return Config.from_yaml(path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    logger.info("Starting locator service...")

    config = load_config()
    configure(LocatorMatrix.from_config(config))

    logger.info(f"Locator service started with {len(_get_matrix().nodes)} locations")
    yield
    logger.info("Locator service stopped")


app = FastAPI(
    title="Locator Service",
    description="Resolves location types to URLs across environments, residency zones and data centers.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(LocatorError)
async def locator_error_handler(request: Request, exc: LocatorError):
    return JSONResponse(
        status_code=400,
        content={"error": "Locator error", "detail": str(exc)},
    )


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    matrix = _get_matrix()
    return HealthResponse(
        status="healthy",
        locations=len(matrix.nodes),
        context=_context_model(matrix.get_context()),
    )


@app.get("/resolve/{type_id}", response_model=ResolveResponse)
async def resolve(
    type_id: str,
    path: str | None = Query(None, description="Path appended to the resolved URL"),
    environment: str | None = None,
    residency: str | None = None,
    data_center_id: str | None = None,
    accessible: str | None = Query(None, description="Comma-separated data center ids"),
):
    """
    Resolve a location type to a URL.

    Context query parameters refine the lookup for this request only; the
    ambient context is left unchanged.  Unknown types resolve to the fallback
    origin with ``found: false``.
    """
    matrix = _get_matrix()

    context: dict[str, Any] | None = None
    overrides = {
        "environment": environment,
        "residency": residency,
        "data_center_id": data_center_id,
        "accessible": [a.strip() for a in accessible.split(",") if a.strip()] if accessible else None,
    }
    if any(v for v in overrides.values()):
        context = overrides

    node = matrix.get_node(type_id, context)
    url = matrix.resolve_url(type_id, path, context)
    return ResolveResponse(
        type_id=type_id,
        url=url,
        found=node is not None,
        location=_location_model(node, matrix) if node is not None else None,
        context=_context_model(matrix.get_context()),
    )


@app.get("/identify", response_model=LocationModel)
async def identify(url: str = Query(..., description="URL to map back to a location")):
    """
    Identify the location a URL belongs to.

    Read-only: the catalog is shared by every client, so the matched node
    keeps its catalog URI.  Only PUT /acting adopts an observed base URL.
    """
    matrix = _get_matrix()
    node = matrix.match_uri(url)
    if node is None:
        raise HTTPException(status_code=404, detail=f"No location matches {url}")
    return _location_model(node, matrix)


@app.get("/context", response_model=ContextModel)
async def get_context():
    """Current ambient resolution context."""
    return _context_model(_get_matrix().get_context())


@app.put("/context", response_model=ContextModel)
async def update_context(update: ContextModel):
    """Merge fields into the ambient context (unset fields are left unchanged)."""
    matrix = _get_matrix()
    return _context_model(matrix.set_context(update.model_dump(exclude_none=True)))


@app.get("/acting", response_model=ActingResponse)
async def get_acting():
    """The acting node, if one has been detected."""
    matrix = _get_matrix()
    node = matrix.get_acting_node()
    return ActingResponse(
        acting_uri=matrix.acting_uri,
        location=_location_model(node, matrix) if node is not None else None,
        context=_context_model(matrix.get_context()),
    )


@app.put("/acting", response_model=ActingResponse)
async def update_acting(update: ActingUpdate):
    """Set (or clear) the acting URI."""
    matrix = _get_matrix()
    matrix.set_acting_uri(update.uri)
    return await get_acting()


@app.get("/locations", response_model=LocationListResponse)
async def list_locations(
    type_id: str | None = None,
    environment: str | None = None,
    residency: str | None = None,
):
    """List catalog locations, optionally filtered."""
    matrix = _get_matrix()

    def matches(node: LocationDescriptor) -> bool:
        return (
            (type_id is None or node.type_id == type_id)
            and (environment is None or node.environment == environment)
            and (residency is None or node.residency == residency)
        )

    nodes = matrix.search(matches)
    return LocationListResponse(
        locations=[_location_model(n, matrix) for n in nodes],
        count=len(nodes),
    )


def run():
    """Run the service with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config()
    uvicorn.run(
        "locator_svc.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.reload,
    )


if __name__ == "__main__":
    run()

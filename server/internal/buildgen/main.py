"""
Building Generation Service
Main entry point for the Python building generation service.
"""

import logging
import os
import sys
from pathlib import Path

# Add server directory to path for imports
server_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(server_dir))

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Union
import uvicorn

from internal.buildgen import config
from internal.buildgen.footprints import Footprint, FootprintError, load_catalog
from internal.buildgen.generator import BuildingGenerator
from internal.buildgen.openings import load_opening_assets
from internal.buildgen.seeds import RandomStream

logger = logging.getLogger(__name__)

SERVICE_NAME = "buildgen-service"
SERVICE_VERSION = "0.1.0"
MAX_BUILDINGS_PER_REQUEST = 50
MAX_FOOTPRINT_SIDE = 8

app = FastAPI(
    title="Building Generation Service",
    description="Service for generating footprint-based building meshes with door and window placements",
    version=SERVICE_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Load configuration
cfg = config.load_config()
catalog = load_catalog(cfg.footprint_catalog_path)
door_pool, window_pool, asset_host = load_opening_assets(cfg.opening_assets_path)
generator = BuildingGenerator(
    catalog,
    door_pool,
    window_pool,
    asset_host,
    wall_textures=cfg.wall_textures,
    roof_textures=cfg.roof_textures,
)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    service: str
    version: str


class FootprintInfo(BaseModel):
    """Catalog entry"""

    name: Optional[str]
    rows: List[List[int]]
    width: int
    depth: int
    occupied_cells: int
    concave: bool


class GenerateBuildingsRequest(BaseModel):
    """Request to generate a batch of buildings"""

    seed: Optional[int] = Field(
        default=None, description="Random seed (uses WORLD_SEED if not provided)"
    )
    count: Optional[int] = Field(
        default=None, ge=1, le=MAX_BUILDINGS_PER_REQUEST, description="Number of buildings"
    )
    spacing: Optional[float] = Field(
        default=None, description="X offset between consecutive buildings"
    )
    footprint: Optional[Union[str, List[List[int]]]] = Field(
        default=None,
        description="Catalog footprint name or explicit 0/1 grid; drawn from the catalog when omitted",
    )


class GenerateBuildingsResponse(BaseModel):
    """Response from building generation"""

    success: bool
    seed: int
    buildings: List[Dict[str, Any]] = []
    warning_count: int = 0
    message: Optional[str] = None


def _resolve_footprint(value: Union[str, List[List[int]], None]) -> Optional[Footprint]:
    if value is None:
        return None
    if isinstance(value, str):
        footprint = catalog.get(value)
        if footprint is None:
            raise HTTPException(status_code=404, detail=f"Unknown footprint: {value}")
        return footprint
    if len(value) > MAX_FOOTPRINT_SIDE or any(len(row) > MAX_FOOTPRINT_SIDE for row in value):
        raise FootprintError(
            f"custom: grid exceeds {MAX_FOOTPRINT_SIDE}x{MAX_FOOTPRINT_SIDE} cells"
        )
    return Footprint(value, name="custom")


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(status="ok", service=SERVICE_NAME, version=SERVICE_VERSION)


@app.get("/api/v1/footprints", response_model=List[FootprintInfo])
async def list_footprints():
    """List the footprint catalog"""
    return [FootprintInfo(**footprint.to_dict()) for footprint in catalog]


@app.post("/api/v1/buildings/generate", response_model=GenerateBuildingsResponse)
async def generate_buildings(request: GenerateBuildingsRequest):
    """
    Generate buildings sequentially from one seeded stream.

    Building i is placed at (i * spacing, 0, 0).
    """
    seed = request.seed if request.seed is not None else cfg.world_seed
    count = request.count if request.count is not None else cfg.building_count
    spacing = request.spacing if request.spacing is not None else cfg.building_spacing

    try:
        footprint = _resolve_footprint(request.footprint)
    except FootprintError as e:
        raise HTTPException(status_code=422, detail=f"Invalid footprint: {e}")

    try:
        stream = RandomStream(seed)
        buildings = [
            generator.generate(stream, (i * spacing, 0.0, 0.0), footprint)
            for i in range(count)
        ]
    except Exception as e:
        logger.exception("Building generation failed")
        raise HTTPException(
            status_code=500, detail=f"Failed to generate buildings: {str(e)}"
        )

    warning_count = sum(len(b.warnings) for b in buildings)
    return GenerateBuildingsResponse(
        success=True,
        seed=seed,
        buildings=[b.to_dict() for b in buildings],
        warning_count=warning_count,
        message=f"Generated {len(buildings)} buildings",
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG if cfg.environment == "development" else logging.INFO)
    port = int(os.getenv("BUILDGEN_SERVICE_PORT", "8082"))
    host = os.getenv("BUILDGEN_SERVICE_HOST", "0.0.0.0")

    uvicorn.run(
        "main:app", host=host, port=port, reload=cfg.environment == "development"
    )

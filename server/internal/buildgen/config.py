"""
Configuration management for the building generation service.
"""

import os
from typing import Optional, Tuple

from dotenv import load_dotenv


def _pair(value: str, name: str) -> Tuple[str, str]:
    parts = tuple(p.strip() for p in value.split(",") if p.strip())
    if len(parts) != 2:
        raise ValueError(f"{name} must list exactly two names, got {value!r}")
    return parts


class Config:
    """Configuration for building generation service"""

    def __init__(self):
        # Server configuration
        self.host = os.getenv("BUILDGEN_SERVICE_HOST", "0.0.0.0")
        self.port = int(os.getenv("BUILDGEN_SERVICE_PORT", "8082"))
        self.environment = os.getenv("ENVIRONMENT", "development")

        # Generation configuration
        self.world_seed = int(os.getenv("WORLD_SEED", "12345"))
        self.building_count = int(os.getenv("BUILDING_COUNT", "3"))
        self.building_spacing = float(os.getenv("BUILDING_SPACING", "4.0"))

        # Asset configuration
        self.footprint_catalog_path: Optional[str] = os.getenv("FOOTPRINT_CATALOG_PATH") or None
        self.opening_assets_path: Optional[str] = os.getenv("OPENING_ASSETS_PATH") or None
        self.wall_textures = _pair(os.getenv("WALL_TEXTURES", "wall_brick,wall_plaster"), "WALL_TEXTURES")
        self.roof_textures = _pair(os.getenv("ROOF_TEXTURES", "roof_tile,roof_slate"), "ROOF_TEXTURES")


def load_config(dotenv_path: Optional[str] = None) -> Config:
    """Load configuration from environment variables (and a .env file if present)"""
    load_dotenv(dotenv_path, override=False)
    return Config()

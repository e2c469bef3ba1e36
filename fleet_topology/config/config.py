from pathlib import Path
from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

import os

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from TOPOLOGY_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="TOPOLOGY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Canvas
    canvas_width: float = Field(default=1200.0, gt=0, description="Canvas width")
    canvas_height: float = Field(default=1200.0, gt=0, description="Canvas height")
    margin: float = Field(default=50.0, ge=0, description="Inset kept clear on every canvas edge")

    # Seeding
    server_radius: float = Field(default=150.0, ge=0, description="Radius of the initial server ring")
    jitter_range: float = Field(default=60.0, ge=0, description="Max per-axis project offset from its anchor")

    # Simulation
    iterations: int = Field(default=200, ge=0, description="Simulation steps per layout")
    damping: float = Field(default=0.85, ge=0, le=1, description="Velocity decay per step")
    repulsion_constant: float = Field(default=2000.0, ge=0, description="Node repulsion strength")
    attraction_constant: float = Field(default=0.01, ge=0, description="Edge spring stiffness")
    ideal_edge_length: float = Field(default=150.0, gt=0, description="Edge spring rest length")

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    max_nodes: int = Field(default=500, gt=0, description="Largest topology the API will lay out")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")


# Instantiate singleton settings object
settings = Settings()

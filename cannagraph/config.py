from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

ENV_PREFIX = "CANNAGRAPH_"

@dataclass(frozen=True)
class SimilarityConfig:
    top_n: int = 5
    min_score: float = 3.0
    thc_tolerance: float = 3.0
    genetic_weight: float = 2.0
    terpene_weight: float = 1.0
    effect_weight: float = 0.5
    thc_weight: float = 1.0

@dataclass(frozen=True)
class GraphConfig:
    similarity: SimilarityConfig = field(default_factory=SimilarityConfig)
    city_min_products: int = 10
    unknown_city: str = "Unknown"
    image_base_url: str = "https://weed.de"
    report_dir: Optional[Path] = None

    @staticmethod
    def from_env(project_root: Optional[Path] = None) -> "GraphConfig":
        load_env(project_root)
        similarity = SimilarityConfig(
            top_n=_env_int("SIMILAR_TOP_N", 5),
            min_score=_env_float("SIMILAR_MIN_SCORE", 3.0),
            thc_tolerance=_env_float("SIMILAR_THC_TOLERANCE", 3.0),
        )
        report_dir = os.environ.get(ENV_PREFIX + "REPORT_DIR")
        return GraphConfig(
            similarity=similarity,
            city_min_products=_env_int("CITY_MIN_PRODUCTS", 10),
            unknown_city=os.environ.get(ENV_PREFIX + "UNKNOWN_CITY", "Unknown"),
            image_base_url=os.environ.get(ENV_PREFIX + "IMAGE_BASE_URL", "https://weed.de").rstrip("/"),
            report_dir=Path(report_dir) if report_dir else None,
        )

    def as_dict(self) -> Dict[str, Any]:
        return {
            "similarity": {
                "top_n": self.similarity.top_n,
                "min_score": self.similarity.min_score,
                "thc_tolerance": self.similarity.thc_tolerance,
            },
            "city_min_products": self.city_min_products,
            "unknown_city": self.unknown_city,
            "image_base_url": self.image_base_url,
            "report_dir": str(self.report_dir) if self.report_dir else None,
        }

def find_project_root(start: Optional[Path] = None) -> Path:
    """Walk up from `start` looking for pyproject.toml; fall back to `start`."""
    if start is None:
        start = Path.cwd()
    cur = start.resolve()
    while True:
        if (cur / "pyproject.toml").exists():
            return cur
        if cur.parent == cur:
            return start
        cur = cur.parent

def load_env(project_root: Optional[Path] = None) -> None:
    """Load a .env file from the project root if present; never overrides the process env."""
    from dotenv import load_dotenv

    if project_root is None:
        project_root = find_project_root()
    dotenv_path = project_root / ".env"
    if dotenv_path.exists():
        load_dotenv(dotenv_path, override=False)

def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{ENV_PREFIX}{key} must not be negative, got {value}")
    return value

def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(ENV_PREFIX + key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be a number, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{ENV_PREFIX}{key} must not be negative, got {value}")
    return value

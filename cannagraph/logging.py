from __future__ import annotations
import logging
from typing import Any, Dict, List
from rich.logging import RichHandler

_LOGGER = logging.getLogger("cannagraph")
_HANDLER = RichHandler(rich_tracebacks=True, markup=True)
_FORMAT = "%(message)s"

def set_verbosity(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=_FORMAT, datefmt="[%X]", handlers=[_HANDLER])
    _LOGGER.setLevel(level)

def log() -> logging.Logger:
    return _LOGGER

class MetricsCollector:
    """Counters and timings gathered while a graph is built."""

    def __init__(self):
        self.counters: Dict[str, int] = {}
        self.timings: Dict[str, List[float]] = {}

    def increment(self, key: str, value: int = 1) -> None:
        self.counters[key] = self.counters.get(key, 0) + value

    def get(self, key: str) -> int:
        return self.counters.get(key, 0)

    def add_timing(self, key: str, duration: float) -> None:
        self.timings.setdefault(key, []).append(duration)

    def get_summary(self) -> Dict[str, Any]:
        summary: Dict[str, Any] = {"counters": dict(sorted(self.counters.items())), "timings": {}}
        for key, times in self.timings.items():
            if times:
                summary["timings"][key] = {
                    "count": len(times),
                    "total": sum(times),
                    "avg": sum(times) / len(times),
                    "min": min(times),
                    "max": max(times),
                }
        return summary

from mapgen.utils.logging_utils import LOG_LEVELS, parse_level, setup_logging
from mapgen.utils.map_rng import MapRNG, MetricsCollector, ensure_rng

__all__ = [
    "LOG_LEVELS",
    "MapRNG",
    "MetricsCollector",
    "ensure_rng",
    "parse_level",
    "setup_logging",
]

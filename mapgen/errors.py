class MapGenError(Exception):
    """Base class for map generation errors."""


class ConfigurationError(MapGenError, ValueError):
    """Raised when generator settings cannot produce a valid map.

    Always raised before the target grid is touched.
    """


__all__ = ["MapGenError", "ConfigurationError"]

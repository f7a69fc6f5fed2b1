"""parse_cache_location

Picks the on-disk cache file for the SDK's local persistence layer.

Primary entrypoints:
 - cache.py (path generation + resolution with fallback retries)
 - controller.py (cache controllers resolving relative paths)
 - config.py (YAML / environment settings)
 - cli.py (Typer CLI)
"""
from .cache import (
    CacheLocationError,
    CacheLocationExhaustedError,
    generate_path,
    resolve_cache_file_path,
    resolve_cache_location,
)
from .controller import CacheController, FileSystemCacheController
from .schema import CacheLocationConfig, FileHandle, ResolvedCacheLocation

__all__ = [
    "CacheController",
    "CacheLocationConfig",
    "CacheLocationError",
    "CacheLocationExhaustedError",
    "FileHandle",
    "FileSystemCacheController",
    "ResolvedCacheLocation",
    "generate_path",
    "resolve_cache_file_path",
    "resolve_cache_location",
]

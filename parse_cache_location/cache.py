"""Cache file location helpers.

Composes the relative cache path for a :class:`CacheLocationConfig` and asks a
cache controller to resolve it. Named configs always map to the same file so
the cache is reused across runs; the fallback config draws random names until
it finds one that is not taken.
"""
from __future__ import annotations

import logging
import random
from typing import Optional, Tuple

from tenacity import Retrying, retry_if_result, stop_after_attempt

from .controller import CacheController
from .schema import CacheLocationConfig, FileHandle, ResolvedCacheLocation

logger = logging.getLogger(__name__)

ROOT_FOLDER = "Parse"
GLOBAL_FOLDER = "_global"
FALLBACK_FOLDER = "_fallback"
# Always appended so periods in an identifier never become the extension.
CACHE_FILE_EXTENSION = ".cachefile"

RANDOM_NAME_UPPER_BOUND = 2**31 - 1
DEFAULT_MAX_ATTEMPTS = 100

# Seeded once from OS entropy and shared by every retry.
_rng = random.Random()


class CacheLocationError(Exception):
    """Base class for cache location failures."""


class CacheLocationExhaustedError(CacheLocationError):
    """Every fallback candidate checked was already taken."""

    def __init__(self, attempts: int, last_relative_path: str):
        super().__init__(
            f"No free fallback cache file after {attempts} attempt(s); last tried {last_relative_path}"
        )
        self.attempts = attempts
        self.last_relative_path = last_relative_path


def generate_path(config: CacheLocationConfig, rng: Optional[random.Random] = None) -> str:
    """Return the relative cache path for ``config``.

    Example: Parse/_global/user123.cachefile or Parse/_fallback/1804289383.cachefile
    """
    if config.is_fallback:
        name = str((rng or _rng).randrange(RANDOM_NAME_UPPER_BOUND))
        folder = FALLBACK_FOLDER
    else:
        name = config.identifier
        folder = GLOBAL_FOLDER
    return f"{ROOT_FOLDER}/{folder}/{name}{CACHE_FILE_EXTENSION}"


def resolve_cache_location(
    config: CacheLocationConfig,
    cache_controller: CacheController,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> ResolvedCacheLocation:
    """Resolve ``config`` to a concrete cache file through ``cache_controller``.

    Named configs take the first handle, existing or not. Fallback configs
    regenerate the name while the controller reports the file exists, giving
    up with :class:`CacheLocationExhaustedError` after ``max_attempts``
    lookups. Controller errors propagate unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    attempts = 0

    def attempt() -> Tuple[str, FileHandle]:
        nonlocal attempts
        attempts += 1
        relative_path = generate_path(config, rng)
        return relative_path, cache_controller.get_file_for_relative_path(relative_path)

    def taken(outcome: Tuple[str, FileHandle]) -> bool:
        return config.is_fallback and outcome[1].exists

    def log_collision(retry_state) -> None:
        if not retry_state.outcome.failed and taken(retry_state.outcome.result()):
            logger.debug("Fallback cache file %s already exists", retry_state.outcome.result()[0])

    def exhausted(retry_state):
        relative_path, _ = retry_state.outcome.result()
        logger.warning("Giving up on fallback cache file after %d attempts", attempts)
        raise CacheLocationExhaustedError(attempts, relative_path)

    retryer = Retrying(
        stop=stop_after_attempt(max_attempts),
        retry=retry_if_result(taken),
        after=log_collision,
        retry_error_callback=exhausted,
    )
    relative_path, handle = retryer(attempt)
    return ResolvedCacheLocation(
        relative_path=relative_path,
        absolute_path=handle.absolute_path,
        is_fallback=config.is_fallback,
        attempts=attempts,
    )


def resolve_cache_file_path(
    config: CacheLocationConfig,
    cache_controller: CacheController,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    rng: Optional[random.Random] = None,
) -> str:
    """Return the absolute cache file path for ``config``."""
    return resolve_cache_location(
        config, cache_controller, max_attempts=max_attempts, rng=rng
    ).absolute_path


__all__ = [
    "CACHE_FILE_EXTENSION",
    "DEFAULT_MAX_ATTEMPTS",
    "CacheLocationError",
    "CacheLocationExhaustedError",
    "generate_path",
    "resolve_cache_file_path",
    "resolve_cache_location",
]

import logging
import random
import re

import pytest

from parse_cache_location.cache import (
    CacheLocationExhaustedError,
    generate_path,
    resolve_cache_file_path,
    resolve_cache_location,
)
from parse_cache_location.schema import CacheLocationConfig, FileHandle

FALLBACK_RE = re.compile(r"^Parse/_fallback/\d+\.cachefile$")


class FakeController:
    """Reports the first ``taken`` lookups as existing files."""

    def __init__(self, taken=0):
        self.taken = taken
        self.calls = []

    def get_file_for_relative_path(self, relative_path):
        self.calls.append(relative_path)
        exists = len(self.calls) <= self.taken
        return FileHandle(exists=exists, absolute_path=f"/data/{relative_path}")


def test_generate_path_named():
    config = CacheLocationConfig(identifier="user123")
    assert generate_path(config) == "Parse/_global/user123.cachefile"
    # Deterministic across calls
    assert generate_path(config) == generate_path(config)


def test_generate_path_keeps_periods_in_identifier():
    config = CacheLocationConfig(identifier="com.example.app")
    assert generate_path(config) == "Parse/_global/com.example.app.cachefile"


def test_generate_path_empty_identifier():
    # Only None is rejected; an empty name still gets the fixed extension
    config = CacheLocationConfig(identifier="")
    assert generate_path(config) == "Parse/_global/.cachefile"


def test_generate_path_fallback_shape():
    config = CacheLocationConfig.fallback()
    for _ in range(20):
        assert FALLBACK_RE.match(generate_path(config))


def test_generate_path_fallback_seeded_rng_reproducible():
    config = CacheLocationConfig.fallback()
    a = [generate_path(config, random.Random(7)) for _ in range(3)]
    b = [generate_path(config, random.Random(7)) for _ in range(3)]
    assert a == b
    rng = random.Random(7)
    assert len({generate_path(config, rng) for _ in range(5)}) > 1


def test_resolve_named_ignores_existence_and_is_idempotent():
    config = CacheLocationConfig(identifier="user123")
    controller = FakeController(taken=10)
    first = resolve_cache_file_path(config, controller)
    second = resolve_cache_file_path(config, controller)
    assert first == second == "/data/Parse/_global/user123.cachefile"
    assert len(controller.calls) == 2


def test_resolve_fallback_single_call_when_free():
    controller = FakeController(taken=0)
    location = resolve_cache_location(CacheLocationConfig.fallback(), controller)
    assert len(controller.calls) == 1
    assert location.attempts == 1
    assert location.is_fallback is True
    assert FALLBACK_RE.match(location.relative_path)
    assert location.absolute_path == f"/data/{controller.calls[0]}"


@pytest.mark.parametrize("taken", [1, 3, 9])
def test_resolve_fallback_retries_until_free(taken):
    controller = FakeController(taken=taken)
    path = resolve_cache_file_path(CacheLocationConfig.fallback(), controller, rng=random.Random(1))
    assert len(controller.calls) == taken + 1
    assert path == f"/data/{controller.calls[-1]}"


def test_resolve_fallback_exhausted(caplog):
    caplog.set_level(logging.DEBUG, logger="parse_cache_location")
    controller = FakeController(taken=1000)
    with pytest.raises(CacheLocationExhaustedError) as exc_info:
        resolve_cache_file_path(CacheLocationConfig.fallback(), controller, max_attempts=5)
    assert len(controller.calls) == 5
    assert exc_info.value.attempts == 5
    assert exc_info.value.last_relative_path == controller.calls[-1]

    records = [r for r in caplog.records if r.name == "parse_cache_location.cache"]
    # One DEBUG per collision, then a single WARNING when giving up
    assert [r.levelno for r in records] == [logging.DEBUG] * 5 + [logging.WARNING]
    assert controller.calls[0] in records[0].getMessage()


def test_resolve_rejects_non_positive_max_attempts():
    with pytest.raises(ValueError):
        resolve_cache_file_path(CacheLocationConfig.fallback(), FakeController(), max_attempts=0)


def test_controller_errors_propagate_unchanged():
    class Denied:
        calls = 0

        def get_file_for_relative_path(self, relative_path):
            self.calls += 1
            raise PermissionError("denied")

    controller = Denied()
    with pytest.raises(PermissionError, match="denied"):
        resolve_cache_file_path(CacheLocationConfig.fallback(), controller)
    assert controller.calls == 1

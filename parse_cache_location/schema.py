from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional


class CacheLocationConfig(BaseModel):
    """Where the SDK keeps its cache file.

    Named configs (``is_fallback=False``) label the file with ``identifier``.
    The fallback config is used before the client is initialised and picks a
    random, unused file name instead.
    """
    model_config = ConfigDict(frozen=True)

    identifier: Optional[str] = None
    is_fallback: bool = False

    @model_validator(mode="after")
    def require_identifier(self):
        if not self.is_fallback and self.identifier is None:
            raise ValueError("identifier is required when is_fallback is False")
        return self

    @classmethod
    def fallback(cls) -> "CacheLocationConfig":
        return cls(is_fallback=True)


class FileHandle(BaseModel):
    """What a cache controller reports for a relative path."""
    exists: bool
    absolute_path: str


class ResolvedCacheLocation(BaseModel):
    relative_path: str
    absolute_path: str
    is_fallback: bool
    # Number of controller lookups it took; always 1 for named configs.
    attempts: int

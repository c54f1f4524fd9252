"""Global configuration for ifacelens.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class IfaceLensConfig(BaseSettings):
    """ifacelens configuration settings.

    Values can be overridden via environment variables with IFACELENS_ prefix.
    Example: IFACELENS_FILE_CACHE_TTL=10 overrides file_cache_ttl.
    """

    # Cache
    file_cache_ttl: float = Field(
        default=30.0,
        gt=0,
        description="Lifetime of file-level cache entries in seconds",
    )
    package_cache_ttl: float = Field(
        default=300.0,
        gt=0,
        description="Lifetime of package-level cache entries in seconds",
    )

    # Resolution
    max_embedding_iterations: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Bound on embedding propagation rounds (max resolved chain depth)",
    )

    # Aggregation
    max_workers: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Worker threads used to extract files of one package",
    )
    include_test_files: bool = Field(
        default=True,
        description="Whether *_test.go files take part in a package",
    )
    parent_dir_fallback: bool = Field(
        default=True,
        description="Scan the parent directory once when a directory has no declarations",
    )

    model_config = {
        "env_prefix": "IFACELENS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> IfaceLensConfig:
    """Get cached configuration instance.

    Returns:
        IfaceLensConfig singleton instance.
    """
    return IfaceLensConfig()


def reload_config() -> IfaceLensConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh IfaceLensConfig instance.
    """
    get_config.cache_clear()
    return get_config()

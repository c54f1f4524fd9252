"""Business services for ifacelens."""

from ifacelens.services.analysis_service import AnalysisService
from ifacelens.services.cache_service import (
    CacheEntry,
    CacheStats,
    ResolutionCache,
    normalize_path,
)
from ifacelens.services.navigation_service import NavigationService
from ifacelens.services.package_service import PackageAggregator, PackageBuild
from ifacelens.services.resolver_service import ImplementationResolver, coverage

__all__ = [
    "AnalysisService",
    "CacheEntry",
    "CacheStats",
    "ImplementationResolver",
    "NavigationService",
    "PackageAggregator",
    "PackageBuild",
    "ResolutionCache",
    "coverage",
    "normalize_path",
]

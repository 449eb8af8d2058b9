"""Developer tools for the markup-to-tree pipeline."""

from .profiling import (
    LayerPerformance,
    PerformanceProfiler,
    PerformanceReport,
    ProfilingSession,
)

__all__ = [
    "LayerPerformance",
    "PerformanceProfiler",
    "PerformanceReport",
    "ProfilingSession",
]

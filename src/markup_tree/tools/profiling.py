"""Performance profiling for the markup-to-tree pipeline.

Times the tokenization and tree building stages separately and tracks the
process resident set size around each stage with psutil.
"""

import json
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import psutil

from markup_tree.shared import ParserConfig
from markup_tree.shared.logging import get_logger
from markup_tree.tokenization import MarkupTokenizer
from markup_tree.tree import TreeBuilder


@dataclass
class LayerPerformance:
    """Performance metrics for a single pipeline stage."""

    layer_name: str
    start_time: float
    end_time: float = 0.0
    memory_start: int = 0  # bytes
    memory_end: int = 0  # bytes
    operations_count: int = 0

    @property
    def duration_ms(self) -> float:
        """Processing duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def memory_delta(self) -> int:
        """Memory usage change in bytes."""
        return self.memory_end - self.memory_start

    @property
    def ops_per_second(self) -> float:
        duration_s = self.end_time - self.start_time
        return self.operations_count / duration_s if duration_s > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer_name": self.layer_name,
            "duration_ms": self.duration_ms,
            "memory_delta": self.memory_delta,
            "operations_count": self.operations_count,
            "ops_per_second": self.ops_per_second,
        }


@dataclass
class ProfilingSession:
    """Container for one profiled pipeline run."""

    session_id: str
    start_time: float
    end_time: float = 0.0
    input_size: int = 0  # characters
    layers: List[LayerPerformance] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def total_duration_ms(self) -> float:
        """Total session duration in milliseconds."""
        return (self.end_time - self.start_time) * 1000

    @property
    def throughput_chars_per_s(self) -> float:
        duration_s = self.end_time - self.start_time
        if duration_s <= 0:
            return 0.0
        return self.input_size / duration_s

    def get_layer(self, layer_name: str) -> Optional[LayerPerformance]:
        return next(
            (layer for layer in self.layers if layer.layer_name == layer_name), None
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "input_size": self.input_size,
            "total_duration_ms": self.total_duration_ms,
            "throughput_chars_per_s": self.throughput_chars_per_s,
            "metadata": dict(self.metadata),
            "layers": [layer.to_dict() for layer in self.layers],
        }


@dataclass
class PerformanceReport:
    """Aggregate of profiled sessions."""

    sessions: List[ProfilingSession]
    generation_time: float

    @property
    def session_count(self) -> int:
        return len(self.sessions)

    @property
    def average_duration_ms(self) -> float:
        if not self.sessions:
            return 0.0
        return sum(s.total_duration_ms for s in self.sessions) / len(self.sessions)

    def average_layer_duration_ms(self, layer_name: str) -> float:
        durations = [
            layer.duration_ms
            for session in self.sessions
            for layer in session.layers
            if layer.layer_name == layer_name
        ]
        if not durations:
            return 0.0
        return sum(durations) / len(durations)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation_time": self.generation_time,
            "summary": {
                "session_count": self.session_count,
                "average_duration_ms": self.average_duration_ms,
                "average_tokenization_ms": self.average_layer_duration_ms("tokenization"),
                "average_tree_building_ms": self.average_layer_duration_ms("tree_building"),
            },
            "sessions": [session.to_dict() for session in self.sessions],
        }


class LayerProfiler:
    """Context manager for profiling one pipeline stage."""

    def __init__(self, profiler: "PerformanceProfiler", session: ProfilingSession,
                 layer_name: str):
        self.profiler = profiler
        self.session = session
        self.layer_name = layer_name
        self.layer_perf: Optional[LayerPerformance] = None

    def __enter__(self) -> LayerPerformance:
        self.layer_perf = LayerPerformance(
            layer_name=self.layer_name,
            start_time=time.time(),
            memory_start=self.profiler.current_rss(),
        )
        return self.layer_perf

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.layer_perf is None:
            return
        self.layer_perf.end_time = time.time()
        self.layer_perf.memory_end = self.profiler.current_rss()
        self.session.layers.append(self.layer_perf)


class PerformanceProfiler:
    """Profiler for tokenization and tree building runs.

    Examples:
        >>> profiler = PerformanceProfiler()
        >>> session = profiler.profile("<a>x</a>", "run-1")
        >>> [layer.layer_name for layer in session.layers]
        ['tokenization', 'tree_building']
    """

    def __init__(
        self,
        enable_memory_tracking: bool = True,
        config: Optional[ParserConfig] = None
    ):
        """Initialize performance profiler.

        Args:
            enable_memory_tracking: Whether to sample process RSS around each stage
            config: Parser configuration used for profiled runs
        """
        self.enable_memory_tracking = enable_memory_tracking
        self.config = config or ParserConfig()
        self.sessions: List[ProfilingSession] = []
        self.logger = get_logger(__name__, None, "performance_profiler")
        self._process = psutil.Process() if enable_memory_tracking else None

    def current_rss(self) -> int:
        """Resident set size of this process in bytes, or 0 when not tracking."""
        if self._process is None:
            return 0
        return self._process.memory_info().rss

    def profile_layer(self, session: ProfilingSession, layer_name: str) -> LayerProfiler:
        return LayerProfiler(self, session, layer_name)

    def profile(self, markup: str, session_id: str) -> ProfilingSession:
        """Run the pipeline over ``markup`` and record per-stage metrics."""
        session = ProfilingSession(
            session_id=session_id,
            start_time=time.time(),
            input_size=len(markup),
        )

        with self.profile_layer(session, "tokenization") as layer:
            tokens = MarkupTokenizer(
                report_unterminated_tags=self.config.report_unterminated_tags
            ).tokenize(markup).tokens
            layer.operations_count = len(markup)

        with self.profile_layer(session, "tree_building") as layer:
            result = TreeBuilder(config=self.config).build(tokens)
            layer.operations_count = len(tokens)

        session.end_time = time.time()
        session.metadata = {
            "token_count": len(tokens),
            "element_count": result.element_count,
            "is_balanced": result.is_balanced,
        }
        self.sessions.append(session)

        self.logger.info(
            "Profiled pipeline run",
            extra={
                "session_id": session_id,
                "duration_ms": session.total_duration_ms,
                "memory_tracking": self.enable_memory_tracking,
            },
        )
        return session

    def generate_report(self) -> PerformanceReport:
        return PerformanceReport(
            sessions=self.sessions.copy(),
            generation_time=time.time(),
        )

    def save_report(self, report: PerformanceReport, output_path: Path) -> None:
        output_path.write_text(json.dumps(report.to_dict(), indent=2))
        self.logger.info(
            "Saved performance report",
            extra={"output_path": str(output_path), "session_count": report.session_count},
        )

    def clear_sessions(self) -> None:
        self.sessions.clear()

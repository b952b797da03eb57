"""Performance metrics and side-by-side comparison of algorithm runs."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from .engine import run_algorithm
from .heuristics import is_admissible_for
from .types import ALGORITHM_NAMES, AlgorithmId, Problem, SearchConfig, SearchResult

logger = logging.getLogger(__name__)

COST_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PerformanceMetrics:
    """Summary figures of one run, used by comparison views."""
    algorithm: AlgorithmId
    execution_time_ms: float
    nodes_visited: int
    path_cost: Optional[float] = None
    memory_usage_kb: Optional[int] = None
    path_length: Optional[int] = None
    optimal: Optional[bool] = None


@dataclass
class ComparisonReport:
    """Results of running several algorithms on the same problem."""
    problem: Problem
    results: List[SearchResult] = field(default_factory=list)
    metrics: List[PerformanceMetrics] = field(default_factory=list)

    @property
    def best_cost(self) -> Optional[float]:
        return best_path_cost(self.results)

    @property
    def heuristic_admissible(self) -> bool:
        """Whether A* and IDA* costs on this problem are guaranteed optimal."""
        return is_admissible_for(self.problem)

    def result_for(self, algorithm: AlgorithmId) -> Optional[SearchResult]:
        for result in self.results:
            if result.algorithm == algorithm:
                return result
        return None


def best_path_cost(results: Iterable[SearchResult]) -> Optional[float]:
    """Lowest path cost among successful results, None if none succeeded."""
    costs = [r.path_cost for r in results if r.success and r.path_cost is not None]
    return min(costs) if costs else None


def metrics_from_result(result: SearchResult,
                        best_cost: Optional[float] = None) -> PerformanceMetrics:
    """
    Summarize a result.
    optimal is None without a reference cost, False for failed runs.
    """
    optimal = None
    if best_cost is not None:
        optimal = (result.success and result.path_cost is not None
                   and result.path_cost <= best_cost + COST_TOLERANCE)

    return PerformanceMetrics(
        algorithm=result.algorithm,
        execution_time_ms=result.execution_time_ms,
        nodes_visited=result.nodes_visited,
        path_cost=result.path_cost,
        memory_usage_kb=result.memory_usage_kb,
        path_length=result.path_length,
        optimal=optimal,
    )


def compare_algorithms(problem: Problem,
                       algorithms: Optional[Sequence[Union[AlgorithmId, str]]] = None,
                       config: Optional[SearchConfig] = None) -> ComparisonReport:
    """
    Run each algorithm independently on the same problem.

    Args:
        problem: Problem shared by every run
        algorithms: Selectors to run, defaults to all supported algorithms
        config: Engine constants shared by every run

    Returns:
        ComparisonReport with results in the requested order
    """
    if algorithms is None:
        algorithms = list(AlgorithmId)

    report = ComparisonReport(problem=problem)
    for algorithm in algorithms:
        report.results.append(run_algorithm(algorithm, problem, config))

    best_cost = report.best_cost
    report.metrics = [metrics_from_result(r, best_cost) for r in report.results]

    logger.info("Compared %d algorithms, best cost %s", len(report.results), best_cost)
    return report


def format_comparison_table(report: ComparisonReport) -> str:
    """Render a comparison report as a fixed-width text table."""
    headers = ("Algorithm", "Found", "Cost", "Length", "Visited", "Time (ms)", "Mem (KB)", "Optimal")
    rows = []
    for metric in report.metrics:
        rows.append((
            ALGORITHM_NAMES[metric.algorithm],
            "yes" if metric.path_cost is not None else "no",
            "-" if metric.path_cost is None else f"{metric.path_cost:.3f}",
            "-" if metric.path_length is None else str(metric.path_length),
            str(metric.nodes_visited),
            f"{metric.execution_time_ms:.2f}",
            "-" if metric.memory_usage_kb is None else str(metric.memory_usage_kb),
            "-" if metric.optimal is None else ("yes" if metric.optimal else "no"),
        ))

    widths = [max(len(str(cell)) for cell in column) for column in zip(headers, *rows)]
    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for row in rows:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(row, widths)))
    if not report.heuristic_admissible:
        lines.append("Note: heuristic is not admissible here; A* and IDA* may miss the cheapest path.")
    return "\n".join(lines)

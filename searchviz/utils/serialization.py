"""
Serialization utilities for saving and loading problems and search runs.
JSON documents use camelCase keys so files stay compatible with web clients.
"""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from ..domain.engine import UnsupportedAlgorithmError, parse_algorithm
from ..domain.types import (
    CellCoord, GraphEdge, GraphNode, GraphProblem, GridCell, GridProblem,
    Problem, SearchResult, SearchStep,
)

logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"

PathLike = Union[str, Path]


class ProblemFormatError(ValueError):
    """Raised when a document cannot be decoded into a problem or result."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require(data: Dict[str, Any], key: str) -> Any:
    try:
        return data[key]
    except (KeyError, TypeError):
        raise ProblemFormatError(f"Missing required field {key!r}") from None


# Problems

def problem_to_dict(problem: Problem) -> Dict[str, Any]:
    """Convert a problem to a JSON-ready dictionary."""
    if isinstance(problem, GridProblem):
        return {
            "type": "grid",
            "rows": problem.rows,
            "cols": problem.cols,
            "cells": [
                {
                    "row": cell.row,
                    "col": cell.col,
                    "isObstacle": cell.is_obstacle,
                    "isStart": cell.is_start,
                    "isGoal": cell.is_goal,
                    "weight": cell.weight,
                }
                for cell in problem.cells
            ],
            "start": {"row": problem.start.row, "col": problem.start.col},
            "goal": {"row": problem.goal.row, "col": problem.goal.col},
            "allowDiagonal": problem.allow_diagonal,
        }

    if isinstance(problem, GraphProblem):
        nodes = []
        for node in problem.nodes:
            entry = {
                "id": node.id,
                "x": node.x,
                "y": node.y,
                "isStart": node.is_start,
                "isGoal": node.is_goal,
            }
            if node.label is not None:
                entry["label"] = node.label
            if node.heuristic is not None:
                entry["heuristic"] = node.heuristic
            nodes.append(entry)
        return {
            "type": "graph",
            "nodes": nodes,
            "edges": [
                {"from": edge.source, "to": edge.target, "weight": edge.weight}
                for edge in problem.edges
            ],
            "startNodeId": problem.start_node_id,
            "goalNodeId": problem.goal_node_id,
            "isDirected": problem.is_directed,
        }

    raise TypeError(f"Unsupported problem type: {type(problem).__name__}")


def problem_from_dict(data: Dict[str, Any]) -> Problem:
    """
    Create a problem from a dictionary.

    Raises:
        ProblemFormatError: If the type is unknown or a field is missing or malformed
    """
    if not isinstance(data, dict):
        raise ProblemFormatError(f"Expected an object, got {type(data).__name__}")

    problem_type = data.get("type")
    try:
        if problem_type == "grid":
            return _grid_from_dict(data)
        if problem_type == "graph":
            return _graph_from_dict(data)
    except (TypeError, ValueError, AttributeError) as e:
        if isinstance(e, ProblemFormatError):
            raise
        raise ProblemFormatError(f"Malformed {problem_type} problem: {e}") from e
    raise ProblemFormatError(f"Unknown problem type: {problem_type!r}")


def _coord(data: Dict[str, Any]) -> CellCoord:
    return CellCoord(row=int(_require(data, "row")), col=int(_require(data, "col")))


def _grid_from_dict(data: Dict[str, Any]) -> GridProblem:
    cells = [
        GridCell(
            row=int(_require(cell, "row")),
            col=int(_require(cell, "col")),
            is_obstacle=bool(cell.get("isObstacle", False)),
            is_start=bool(cell.get("isStart", False)),
            is_goal=bool(cell.get("isGoal", False)),
            weight=float(cell.get("weight", 1)),
        )
        for cell in _require(data, "cells")
    ]
    return GridProblem(
        rows=int(_require(data, "rows")),
        cols=int(_require(data, "cols")),
        cells=tuple(cells),
        start=_coord(_require(data, "start")),
        goal=_coord(_require(data, "goal")),
        allow_diagonal=bool(data.get("allowDiagonal", False)),
    )


def _graph_from_dict(data: Dict[str, Any]) -> GraphProblem:
    nodes = []
    for node in _require(data, "nodes"):
        heuristic = node.get("heuristic")
        nodes.append(GraphNode(
            id=str(_require(node, "id")),
            x=float(_require(node, "x")),
            y=float(_require(node, "y")),
            label=node.get("label"),
            is_start=bool(node.get("isStart", False)),
            is_goal=bool(node.get("isGoal", False)),
            heuristic=None if heuristic is None else float(heuristic),
        ))
    edges = [
        GraphEdge(
            source=str(_require(edge, "from")),
            target=str(_require(edge, "to")),
            weight=float(edge.get("weight", 1)),
        )
        for edge in _require(data, "edges")
    ]
    return GraphProblem(
        nodes=tuple(nodes),
        edges=tuple(edges),
        start_node_id=str(_require(data, "startNodeId")),
        goal_node_id=str(_require(data, "goalNodeId")),
        is_directed=bool(data.get("isDirected", False)),
    )


# Steps and results

def step_to_dict(step: SearchStep) -> Dict[str, Any]:
    data = {
        "stepNumber": step.step_number,
        "currentNode": step.current_node,
        "frontier": list(step.frontier),
        "visited": list(step.visited),
        "parentMap": dict(step.parent_map),
        "gValues": dict(step.g_values),
        "hValues": dict(step.h_values),
        "fValues": dict(step.f_values),
        "isComplete": step.is_complete,
        "foundGoal": step.found_goal,
    }
    if step.path is not None:
        data["path"] = list(step.path)
    return data


def _float_map(data: Dict[str, Any]) -> Mapping[str, float]:
    return MappingProxyType({k: float(v) for k, v in data.items()})


def step_from_dict(data: Dict[str, Any]) -> SearchStep:
    path = data.get("path")
    return SearchStep(
        step_number=int(_require(data, "stepNumber")),
        current_node=str(_require(data, "currentNode")),
        frontier=tuple(_require(data, "frontier")),
        visited=tuple(_require(data, "visited")),
        parent_map=MappingProxyType(dict(data.get("parentMap", {}))),
        g_values=_float_map(data.get("gValues", {})),
        h_values=_float_map(data.get("hValues", {})),
        f_values=_float_map(data.get("fValues", {})),
        is_complete=bool(data.get("isComplete", False)),
        found_goal=bool(data.get("foundGoal", False)),
        path=None if path is None else tuple(path),
    )


def result_to_dict(result: SearchResult) -> Dict[str, Any]:
    """Convert a search result, including every step, to a dictionary."""
    data = {
        "algorithm": result.algorithm.value,
        "problem": problem_to_dict(result.problem),
        "steps": [step_to_dict(step) for step in result.steps],
        "nodesVisited": result.nodes_visited,
        "executionTimeMs": result.execution_time_ms,
        "memoryUsageKb": result.memory_usage_kb,
        "success": result.success,
    }
    if result.final_path is not None:
        data["finalPath"] = list(result.final_path)
    if result.path_cost is not None:
        data["pathCost"] = result.path_cost
    return data


def result_from_dict(data: Dict[str, Any]) -> SearchResult:
    try:
        algorithm = parse_algorithm(_require(data, "algorithm"))
    except UnsupportedAlgorithmError as e:
        raise ProblemFormatError(str(e)) from e

    final_path = data.get("finalPath")
    path_cost = data.get("pathCost")
    try:
        return SearchResult(
            algorithm=algorithm,
            problem=problem_from_dict(_require(data, "problem")),
            steps=tuple(step_from_dict(step) for step in _require(data, "steps")),
            nodes_visited=int(_require(data, "nodesVisited")),
            execution_time_ms=float(_require(data, "executionTimeMs")),
            memory_usage_kb=int(data.get("memoryUsageKb", 0)),
            success=bool(_require(data, "success")),
            final_path=None if final_path is None else tuple(final_path),
            path_cost=None if path_cost is None else float(path_cost),
        )
    except (TypeError, ValueError, AttributeError) as e:
        if isinstance(e, ProblemFormatError):
            raise
        raise ProblemFormatError(f"Malformed search result: {e}") from e


# Stored records

@dataclass
class SavedProblem:
    """A named problem with metadata."""
    name: str
    problem: Problem
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "problem": problem_to_dict(self.problem),
            "createdAt": self.created_at,
            "version": FORMAT_VERSION,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SavedProblem":
        return cls(
            id=str(_require(data, "id")),
            name=str(data.get("name", "")),
            problem=problem_from_dict(_require(data, "problem")),
            created_at=str(data.get("createdAt", _now())),
        )


@dataclass
class ComparisonRun:
    """Results of several algorithms run on one named problem."""
    problem_name: str
    results: List[SearchResult]
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(default_factory=_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "problemName": self.problem_name,
            "results": [result_to_dict(r) for r in self.results],
            "timestamp": self.timestamp,
            "version": FORMAT_VERSION,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComparisonRun":
        return cls(
            id=str(_require(data, "id")),
            problem_name=str(data.get("problemName", "")),
            results=[result_from_dict(r) for r in _require(data, "results")],
            timestamp=str(data.get("timestamp", _now())),
        )


# Files

def _write_json(data: Dict[str, Any], filepath: Path) -> None:
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _read_json(filepath: Path) -> Any:
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ProblemFormatError(f"{filepath} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ProblemFormatError(f"{filepath} is not UTF-8 text: {e}") from e


def save_problem_file(problem: Problem, filepath: PathLike) -> Path:
    """Write a bare problem document to a JSON file."""
    path = Path(filepath)
    _write_json(problem_to_dict(problem), path)
    logger.info("Saved %s problem to %s", problem.type, path)
    return path


def load_problem_file(filepath: PathLike) -> Problem:
    """
    Load a problem from a JSON file.
    Accepts either a bare problem document or a saved-problem record.

    Raises:
        OSError: If the file cannot be read
        ProblemFormatError: If the content is not a valid problem
    """
    data = _read_json(Path(filepath))
    if isinstance(data, dict) and "problem" in data and "type" not in data:
        data = data["problem"]
    return problem_from_dict(data)


class ProblemLibrary:
    """
    File-backed store of saved problems and comparison runs.

    Layout:
        <directory>/problems/<id>.json
        <directory>/runs/<id>.json
    """

    def __init__(self, directory: PathLike):
        self.directory = Path(directory)
        self._problems_dir = self.directory / "problems"
        self._runs_dir = self.directory / "runs"

    @staticmethod
    def _valid_id(record_id: str) -> bool:
        try:
            uuid.UUID(record_id)
        except (ValueError, TypeError, AttributeError):
            return False
        return True

    def save_problem(self, name: str, problem: Problem) -> SavedProblem:
        saved = SavedProblem(name=name, problem=problem)
        _write_json(saved.to_dict(), self._problems_dir / f"{saved.id}.json")
        logger.info("Saved problem %r as %s", name, saved.id)
        return saved

    def get_problem(self, problem_id: str) -> Optional[SavedProblem]:
        """Get a saved problem by id, returns None if it does not exist."""
        if not self._valid_id(problem_id):
            return None
        filepath = self._problems_dir / f"{problem_id}.json"
        if not filepath.exists():
            return None
        return SavedProblem.from_dict(_read_json(filepath))

    def list_problems(self) -> List[SavedProblem]:
        """All saved problems, newest first. Unreadable files are skipped."""
        problems = self._load_all(self._problems_dir, SavedProblem.from_dict)
        return sorted(problems, key=lambda p: p.created_at, reverse=True)

    def delete_problem(self, problem_id: str) -> bool:
        if not self._valid_id(problem_id):
            return False
        filepath = self._problems_dir / f"{problem_id}.json"
        try:
            filepath.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted problem %s", problem_id)
        return True

    def save_comparison_run(self, problem_name: str,
                            results: List[SearchResult]) -> ComparisonRun:
        run = ComparisonRun(problem_name=problem_name, results=list(results))
        _write_json(run.to_dict(), self._runs_dir / f"{run.id}.json")
        logger.info("Saved comparison run %s with %d results", run.id, len(run.results))
        return run

    def list_comparison_runs(self) -> List[ComparisonRun]:
        """All comparison runs, oldest first."""
        runs = self._load_all(self._runs_dir, ComparisonRun.from_dict)
        return sorted(runs, key=lambda r: r.timestamp)

    def _load_all(self, directory: Path, loader) -> list:
        records = []
        if not directory.exists():
            return records
        for filepath in sorted(directory.glob("*.json")):
            try:
                records.append(loader(_read_json(filepath)))
            except (OSError, ProblemFormatError) as e:
                logger.warning("Skipping unreadable record %s: %s", filepath, e)
        return records

"""Application controller connecting the UI to the search engine and step playback."""

import logging
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from PySide6.QtCore import QObject, QTimer, Signal

from ..domain.engine import parse_algorithm, run_algorithm
from ..domain.metrics import ComparisonReport, compare_algorithms
from ..domain.types import AlgorithmId, Problem, SearchConfig, SearchResult, SearchStep
from ..domain.validation import validate_problem
from ..domain.visual_state import derive_node_states
from ..utils.problem_factory import create_empty_grid
from ..utils.serialization import load_problem_file, save_problem_file
from .fsm import PlaybackState, PlaybackStateMachine

logger = logging.getLogger(__name__)


class PlaybackController(QObject):
    """
    Controller that runs searches and plays back their recorded steps.

    The engine runs to completion synchronously; playback only moves a
    cursor over the immutable steps of the current result.

    Signals:
        result_ready: Emitted when a new search result is available
        step_changed: Emitted with the new step index when the cursor moves
        state_changed: Emitted when the playback state changes
        problem_changed: Emitted when the problem is replaced or edited
        comparison_ready: Emitted with a ComparisonReport after compare_all
        error_occurred: Emitted when an error occurs
    """

    result_ready = Signal(object)  # SearchResult
    step_changed = Signal(int)
    state_changed = Signal(object)  # PlaybackState
    problem_changed = Signal(object)  # Problem
    comparison_ready = Signal(object)  # ComparisonReport
    error_occurred = Signal(str)

    BASE_INTERVAL_MS = 500
    MIN_SPEED = 0.1
    MAX_SPEED = 5.0

    def __init__(self, problem: Optional[Problem] = None, config: Optional[SearchConfig] = None):
        super().__init__()

        self._config = config or SearchConfig()
        self._problem: Problem = problem if problem is not None else create_empty_grid(15, 20)
        self._algorithm = AlgorithmId.BFS
        self._result: Optional[SearchResult] = None
        self._cursor = 0
        self._speed = 1.0

        self._state_machine = PlaybackStateMachine()

        # Timer for play mode
        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_timer_tick)

        self._setup_state_callbacks()

    def _setup_state_callbacks(self):
        """Setup callbacks for state machine transitions."""
        self._state_machine.on_state_enter(PlaybackState.PLAYING, self._on_playing_entered)
        self._state_machine.on_state_enter(PlaybackState.PAUSED, self._on_stopped_entered)
        self._state_machine.on_state_enter(PlaybackState.FINISHED, self._on_stopped_entered)
        self._state_machine.on_state_enter(PlaybackState.IDLE, self._on_stopped_entered)

    # Properties

    @property
    def problem(self) -> Problem:
        return self._problem

    @property
    def algorithm(self) -> AlgorithmId:
        return self._algorithm

    @property
    def config(self) -> SearchConfig:
        return self._config

    @property
    def result(self) -> Optional[SearchResult]:
        return self._result

    @property
    def current_state(self) -> PlaybackState:
        return self._state_machine.current_state

    @property
    def current_step_index(self) -> int:
        return self._cursor

    @property
    def current_step(self) -> Optional[SearchStep]:
        """The step under the cursor, None before any run."""
        if self._result is None or not self._result.steps:
            return None
        return self._result.steps[self._cursor]

    @property
    def total_steps(self) -> int:
        return self._result.total_steps if self._result else 0

    @property
    def speed(self) -> float:
        """Playback speed multiplier."""
        return self._speed

    @speed.setter
    def speed(self, value: float):
        """Set the playback speed, clamped to [MIN_SPEED, MAX_SPEED]."""
        self._speed = max(self.MIN_SPEED, min(self.MAX_SPEED, float(value)))
        if self._timer.isActive():
            self._timer.setInterval(self.interval_ms)

    @property
    def interval_ms(self) -> int:
        """Timer interval for the current speed."""
        return max(1, int(round(self.BASE_INTERVAL_MS / self._speed)))

    # Problem Management

    def set_problem(self, problem: Problem) -> bool:
        """Replace the problem; the current result is discarded."""
        try:
            validate_problem(problem)
        except ValueError as e:
            self.error_occurred.emit(str(e))
            return False

        self._problem = problem
        self.clear_result()
        self.problem_changed.emit(problem)
        return True

    def edit_problem(self, editor: Callable[..., Problem], *args, **kwargs) -> bool:
        """
        Apply a problem_factory editor to the current problem.
        Edits are refused while playback is running.
        """
        if self._state_machine.is_playing():
            return False
        try:
            problem = editor(self._problem, *args, **kwargs)
        except ValueError as e:
            self.error_occurred.emit(f"Edit failed: {e}")
            return False
        if problem is self._problem:
            return False

        self._problem = problem
        self.clear_result()
        self.problem_changed.emit(problem)
        return True

    def load_problem(self, filepath: Union[str, Path]) -> bool:
        try:
            problem = load_problem_file(filepath)
        except (OSError, ValueError) as e:
            logger.error("Failed to load problem from %s: %s", filepath, e)
            self.error_occurred.emit(f"Failed to load problem: {e}")
            return False
        return self.set_problem(problem)

    def save_problem(self, filepath: Union[str, Path]) -> bool:
        try:
            save_problem_file(self._problem, filepath)
        except OSError as e:
            logger.error("Failed to save problem to %s: %s", filepath, e)
            self.error_occurred.emit(f"Failed to save problem: {e}")
            return False
        return True

    def set_algorithm(self, algorithm: Union[AlgorithmId, str]) -> bool:
        """Select the algorithm for the next run; the current result is discarded."""
        try:
            algorithm_id = parse_algorithm(algorithm)
        except ValueError as e:
            self.error_occurred.emit(str(e))
            return False
        if algorithm_id != self._algorithm:
            self._algorithm = algorithm_id
            self.clear_result()
        return True

    # Search

    def run(self) -> Optional[SearchResult]:
        """Run the selected algorithm and rewind playback to its first step."""
        self._timer.stop()
        try:
            validate_problem(self._problem)
            result = run_algorithm(self._algorithm, self._problem, self._config)
        except ValueError as e:
            logger.error("Search failed: %s", e)
            self.error_occurred.emit(str(e))
            return None

        logger.info("%s finished: success=%s, %d steps, %d visited",
                    result.algorithm.value, result.success, result.total_steps, result.nodes_visited)
        self._result = result
        self._cursor = 0
        self._state_machine.reset_to_idle()
        self.result_ready.emit(result)
        self.step_changed.emit(self._cursor)
        return result

    def compare_all(self, algorithms: Optional[Sequence[Union[AlgorithmId, str]]] = None
                    ) -> Optional[ComparisonReport]:
        """Run several algorithms on the current problem for side-by-side metrics."""
        try:
            validate_problem(self._problem)
            report = compare_algorithms(self._problem, algorithms, self._config)
        except ValueError as e:
            self.error_occurred.emit(str(e))
            return None
        self.comparison_ready.emit(report)
        return report

    def clear_result(self):
        """Drop the current result and return to IDLE."""
        self._timer.stop()
        self._result = None
        self._cursor = 0
        self._state_machine.reset_to_idle()
        self.step_changed.emit(self._cursor)

    # Playback Control

    def play(self) -> bool:
        """Start or resume playback, running the search first if needed."""
        if self._result is None and self.run() is None:
            return False

        if self._state_machine.is_finished():
            self.reset()
        if self._cursor >= self.total_steps - 1:
            return self._state_machine.finish()
        return self._state_machine.play()

    def pause(self) -> bool:
        return self._state_machine.pause() if self._state_machine.can_pause() else False

    def step_forward(self) -> bool:
        """Advance one step; stepping pauses playback."""
        if self._result is None and self.run() is None:
            return False
        if self._cursor >= self.total_steps - 1:
            return False
        self._move_cursor(self._cursor + 1, manual=True)
        return True

    def step_back(self) -> bool:
        if self._result is None or self._cursor == 0:
            return False
        self._move_cursor(self._cursor - 1, manual=True)
        return True

    def seek(self, index: int) -> bool:
        """Jump to a step index, clamped to the recorded range."""
        if self._result is None:
            return False
        index = max(0, min(self.total_steps - 1, index))
        self._move_cursor(index, manual=True)
        return True

    def reset(self) -> bool:
        """Rewind to the first step, keeping the result."""
        self._timer.stop()
        self._cursor = 0
        self.step_changed.emit(self._cursor)
        return self._state_machine.reset_to_idle()

    def _move_cursor(self, index: int, manual: bool):
        self._cursor = index
        self.step_changed.emit(index)

        if index >= self.total_steps - 1:
            if not self._state_machine.is_finished():
                self._state_machine.finish()
        elif manual and not self._state_machine.is_paused():
            self._state_machine.pause()

    # Rendering helpers

    def node_states(self) -> dict:
        """Visual state of every node at the current step."""
        return derive_node_states(self._problem, self.current_step)

    def get_statistics(self) -> dict:
        """Get statistics for the status panel."""
        step = self.current_step
        stats = {
            "algorithm": self._algorithm.value,
            "current_step": self._cursor,
            "total_steps": self.total_steps,
            "frontier_size": len(step.frontier) if step else 0,
            "visited_count": len(step.visited) if step else 0,
            "current_state": self._state_machine.current_state.value,
            "state_description": self._state_machine.get_state_description(),
        }
        if self._result is not None:
            stats.update({
                "success": self._result.success,
                "nodes_visited": self._result.nodes_visited,
                "path_cost": self._result.path_cost,
                "path_length": self._result.path_length,
                "execution_time_ms": self._result.execution_time_ms,
                "memory_usage_kb": self._result.memory_usage_kb,
            })
        return stats

    # State Machine Callbacks

    def _on_playing_entered(self, context):
        self._timer.start(self.interval_ms)
        self.state_changed.emit(PlaybackState.PLAYING)

    def _on_stopped_entered(self, context):
        self._timer.stop()
        self.state_changed.emit(self._state_machine.current_state)

    def _on_timer_tick(self):
        """Called on each timer tick during play mode."""
        if self._state_machine.is_playing():
            self._move_cursor(self._cursor + 1, manual=False)

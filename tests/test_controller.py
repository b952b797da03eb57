"""Tests for the playback controller (no widgets are created)."""

import pytest
from PySide6.QtCore import QCoreApplication

from searchviz.app.controller import PlaybackController
from searchviz.app.fsm import PlaybackState
from searchviz.domain.types import AlgorithmId
from searchviz.utils.problem_factory import create_empty_graph, set_obstacle


@pytest.fixture(scope="module")
def qt_app():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def controller(qt_app, open_grid):
    return PlaybackController(open_grid)


class TestRun:

    def test_run_rewinds_to_first_step(self, controller):
        results = []
        controller.result_ready.connect(results.append)
        result = controller.run()
        assert result.success
        assert results == [result]
        assert controller.current_step_index == 0
        assert controller.current_step is result.steps[0]
        assert controller.current_state == PlaybackState.IDLE

    def test_invalid_problem_is_rejected(self, controller):
        errors = []
        controller.error_occurred.connect(errors.append)
        assert not controller.set_problem(create_empty_graph())
        assert errors

    def test_set_algorithm(self, controller):
        controller.run()
        assert controller.set_algorithm("astar")
        assert controller.algorithm == AlgorithmId.ASTAR
        assert controller.result is None
        assert not controller.set_algorithm("dijkstra")

    def test_compare_all(self, controller):
        report = controller.compare_all()
        assert len(report.results) == len(AlgorithmId)


class TestPlayback:

    def test_stepping_pauses_then_finishes(self, controller):
        controller.run()
        assert controller.step_forward()
        assert controller.current_state == PlaybackState.PAUSED
        while controller.step_forward():
            pass
        assert controller.current_step_index == controller.total_steps - 1
        assert controller.current_state == PlaybackState.FINISHED
        assert controller.current_step.is_complete

    def test_step_back(self, controller):
        controller.run()
        assert not controller.step_back()
        controller.seek(3)
        assert controller.step_back()
        assert controller.current_step_index == 2

    def test_seek_is_clamped(self, controller):
        controller.run()
        controller.seek(10_000)
        assert controller.current_step_index == controller.total_steps - 1
        assert controller.current_state == PlaybackState.FINISHED
        controller.seek(-5)
        assert controller.current_step_index == 0
        assert controller.current_state == PlaybackState.PAUSED

    def test_play_and_pause(self, controller):
        assert controller.play()
        assert controller.current_state == PlaybackState.PLAYING
        assert controller.pause()
        assert controller.current_state == PlaybackState.PAUSED
        assert not controller.pause()

    def test_reset_keeps_result(self, controller):
        result = controller.run()
        controller.seek(2)
        assert controller.reset()
        assert controller.current_step_index == 0
        assert controller.result is result
        assert controller.current_state == PlaybackState.IDLE

    def test_speed_is_clamped(self, controller):
        controller.speed = 2.0
        assert controller.interval_ms == 250
        controller.speed = 100
        assert controller.speed == PlaybackController.MAX_SPEED
        controller.speed = 0
        assert controller.speed == PlaybackController.MIN_SPEED
        assert controller.interval_ms == 5000


class TestEditing:

    def test_edit_discards_result(self, controller):
        controller.run()
        assert controller.edit_problem(set_obstacle, 1, 1)
        assert controller.result is None
        assert controller.problem.get_cell(1, 1).is_obstacle

    def test_noop_edit(self, controller):
        assert not controller.edit_problem(set_obstacle, 0, 0)

    def test_edit_refused_while_playing(self, controller):
        controller.play()
        assert not controller.edit_problem(set_obstacle, 1, 1)

    def test_save_and_load(self, controller, tmp_path):
        controller.edit_problem(set_obstacle, 1, 1)
        path = tmp_path / "problem.json"
        assert controller.save_problem(path)
        controller.edit_problem(set_obstacle, 1, 1, False)
        assert controller.load_problem(path)
        assert controller.problem.get_cell(1, 1).is_obstacle

    def test_load_failure_emits_error(self, controller, tmp_path):
        errors = []
        controller.error_occurred.connect(errors.append)
        assert not controller.load_problem(tmp_path / "missing.json")
        assert errors


class TestRendering:

    def test_node_states_follow_cursor(self, controller):
        assert controller.node_states()["0-1"] == "unvisited"
        controller.run()
        controller.seek(controller.total_steps - 1)
        states = controller.node_states()
        assert states["0-0"] == "start"
        assert states["0-1"] == "path"

    def test_statistics(self, controller):
        stats = controller.get_statistics()
        assert stats["total_steps"] == 0
        controller.run()
        stats = controller.get_statistics()
        assert stats["success"] is True
        assert stats["path_length"] == 4
        assert stats["state_description"] == "Ready"

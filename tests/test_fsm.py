"""Tests for the playback state machine."""

import pytest

from searchviz.app.fsm import PlaybackState, PlaybackStateMachine


@pytest.fixture
def fsm():
    return PlaybackStateMachine()


class TestPlaybackStateMachine:

    def test_starts_idle(self, fsm):
        assert fsm.is_idle()
        assert fsm.get_state_description() == "Ready"

    def test_play_pause_finish(self, fsm):
        assert fsm.play()
        assert fsm.is_playing()
        assert fsm.pause()
        assert fsm.is_paused()
        assert fsm.play()
        assert fsm.finish()
        assert fsm.is_finished()

    def test_invalid_transitions(self, fsm):
        fsm.finish()
        assert not fsm.play()
        assert fsm.is_finished()
        assert fsm.pause()
        assert not fsm.transition_to(PlaybackState.PAUSED)

    def test_can_pause_only_while_playing(self, fsm):
        assert not fsm.can_pause()
        fsm.play()
        assert fsm.can_pause()
        assert not fsm.can_transition_to(PlaybackState.PLAYING)

    def test_state_enter_callback(self, fsm):
        entered = []
        fsm.on_state_enter(PlaybackState.PAUSED, lambda context: entered.append(context))
        fsm.play()
        fsm.pause({"step": 3})
        assert entered == [{"step": 3}]

    def test_transition_callback(self, fsm):
        seen = []
        fsm.on_transition(PlaybackState.PLAYING, PlaybackState.FINISHED,
                          lambda old, new, context: seen.append((old, new)))
        fsm.play()
        fsm.finish()
        assert seen == [(PlaybackState.PLAYING, PlaybackState.FINISHED)]

    def test_reset_skips_callbacks(self, fsm):
        entered = []
        fsm.on_state_enter(PlaybackState.IDLE, lambda context: entered.append(context))
        fsm.play()
        fsm.reset()
        assert fsm.is_idle()
        assert entered == []

    def test_reset_to_idle(self, fsm):
        assert fsm.reset_to_idle()
        fsm.play()
        assert fsm.reset_to_idle()
        assert fsm.is_idle()

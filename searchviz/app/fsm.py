"""Finite State Machine for step playback of a recorded search."""

from enum import Enum
from typing import Callable, Dict, Optional, Set


class PlaybackState(Enum):
    """States of the playback cursor over a recorded search."""
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class PlaybackStateMachine:
    """
    Finite State Machine for managing playback of recorded search steps.

    State Transitions:
    IDLE -> PLAYING (when play is pressed)
    IDLE -> PAUSED (when stepping or seeking manually)
    IDLE -> FINISHED (when seeking straight to the last step)
    PLAYING -> PAUSED (when pause is pressed or the user steps)
    PLAYING -> FINISHED (when the last step is shown)
    PAUSED -> PLAYING (when play is pressed)
    PAUSED -> FINISHED (when stepping onto the last step)
    FINISHED -> PAUSED (when stepping back or seeking)
    PLAYING/PAUSED/FINISHED -> IDLE (when reset is pressed)
    """

    def __init__(self):
        self._current_state = PlaybackState.IDLE
        self._state_callbacks: Dict[PlaybackState, Callable[[Optional[dict]], None]] = {}
        self._transition_callbacks = {}
        self._valid_transitions = self._build_transition_map()

    def _build_transition_map(self) -> Dict[PlaybackState, Set[PlaybackState]]:
        """Build the valid state transition map."""
        return {
            PlaybackState.IDLE: {PlaybackState.PLAYING, PlaybackState.PAUSED, PlaybackState.FINISHED},
            PlaybackState.PLAYING: {PlaybackState.PAUSED, PlaybackState.FINISHED, PlaybackState.IDLE},
            PlaybackState.PAUSED: {PlaybackState.PLAYING, PlaybackState.FINISHED, PlaybackState.IDLE},
            PlaybackState.FINISHED: {PlaybackState.PAUSED, PlaybackState.IDLE},
        }

    @property
    def current_state(self) -> PlaybackState:
        """Get the current state."""
        return self._current_state

    def can_transition_to(self, target_state: PlaybackState) -> bool:
        """Check if transition to target state is valid."""
        return target_state in self._valid_transitions.get(self._current_state, set())

    def transition_to(self, target_state: PlaybackState, context: Optional[dict] = None) -> bool:
        """
        Attempt to transition to the target state.

        Args:
            target_state: The state to transition to
            context: Optional context data for the transition

        Returns:
            True if transition was successful, False otherwise
        """
        if not self.can_transition_to(target_state):
            return False

        old_state = self._current_state
        self._current_state = target_state

        transition_key = (old_state, target_state)
        if transition_key in self._transition_callbacks:
            self._transition_callbacks[transition_key](old_state, target_state, context)

        if target_state in self._state_callbacks:
            self._state_callbacks[target_state](context)

        return True

    def on_state_enter(self, state: PlaybackState, callback: Callable[[Optional[dict]], None]):
        """Register a callback for when entering a specific state."""
        self._state_callbacks[state] = callback

    def on_transition(self, from_state: PlaybackState, to_state: PlaybackState,
                      callback: Callable[[PlaybackState, PlaybackState, Optional[dict]], None]):
        """Register a callback for a specific state transition."""
        self._transition_callbacks[(from_state, to_state)] = callback

    def reset(self):
        """Reset the state machine to IDLE without firing callbacks."""
        self._current_state = PlaybackState.IDLE

    # Convenience methods for common operations

    def can_play(self) -> bool:
        return self.can_transition_to(PlaybackState.PLAYING)

    def can_pause(self) -> bool:
        return self._current_state == PlaybackState.PLAYING

    def is_idle(self) -> bool:
        return self._current_state == PlaybackState.IDLE

    def is_playing(self) -> bool:
        return self._current_state == PlaybackState.PLAYING

    def is_paused(self) -> bool:
        return self._current_state == PlaybackState.PAUSED

    def is_finished(self) -> bool:
        return self._current_state == PlaybackState.FINISHED

    def play(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(PlaybackState.PLAYING, context)

    def pause(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(PlaybackState.PAUSED, context)

    def finish(self, context: Optional[dict] = None) -> bool:
        return self.transition_to(PlaybackState.FINISHED, context)

    def reset_to_idle(self, context: Optional[dict] = None) -> bool:
        """Return to IDLE; a no-op that reports True when already idle."""
        if self._current_state == PlaybackState.IDLE:
            return True
        return self.transition_to(PlaybackState.IDLE, context)

    def get_state_description(self) -> str:
        """Get a human-readable description of the current state."""
        descriptions = {
            PlaybackState.IDLE: "Ready",
            PlaybackState.PLAYING: "Playing",
            PlaybackState.PAUSED: "Paused",
            PlaybackState.FINISHED: "Finished",
        }
        return descriptions.get(self._current_state, "Unknown state")

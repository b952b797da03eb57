"""Qt application layer: playback state machine and controller."""

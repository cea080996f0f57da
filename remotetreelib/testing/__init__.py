"""Testing utilities for RemoteTreeLib consumers."""

from .fixtures import (
    CapturingSink,
    RecordingIndicator,
    ScriptedPrompter,
    build_sample_drive,
)

__all__ = [
    'CapturingSink',
    'RecordingIndicator',
    'ScriptedPrompter',
    'build_sample_drive',
]

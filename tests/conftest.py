"""Shared test fixtures for the Fibonacci spiral tests."""

import pytest

from fibspiral.renderers import RecordingRenderer
from fibspiral.session import SpiralSession


@pytest.fixture
def fibonacci_samples():
    """F(0)..F(6)."""
    return [0, 1, 1, 2, 3, 5, 8]


@pytest.fixture
def recorder():
    return RecordingRenderer()


@pytest.fixture
def session_config(tmp_path):
    """Fast-polling session config saving into a temporary directory."""
    return {
        'session': {
            'spin_interval': 0.001,
            'ready_timeout': 5.0,
            'join_timeout': 5.0
        },
        'persistence': {
            'directory': str(tmp_path),
            'binary_file': 'fibspiral.bin',
            'text_file': 'fibspiral.txt'
        }
    }


@pytest.fixture
def session(recorder, session_config):
    """Session drawing into a 500x800 recording renderer."""
    s = SpiralSession(recorder, 500, 800, session_config)
    yield s
    if s.started:
        s.abort(timeout=1.0)

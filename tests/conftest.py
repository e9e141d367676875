"""Shared fixtures for lane geometry tests."""

from __future__ import annotations

import logging
import sys

import numpy as np
import pytest

from bezier_road.nodes import InMemorySceneHost
from bezier_road.utils import logging_config


@pytest.fixture
def straight_line() -> np.ndarray:
    """Ten units along +X in the ground plane."""
    return np.array([[0.0, 0.0, 0.0], [10.0, 0.0, 0.0]])


@pytest.fixture
def s_curve() -> np.ndarray:
    """Cubic S-curve in the XZ plane."""
    return np.array([
        [0.0, 0.0, 0.0],
        [5.0, 0.0, 5.0],
        [10.0, 0.0, -5.0],
        [15.0, 0.0, 0.0],
    ])


@pytest.fixture
def host() -> InMemorySceneHost:
    return InMemorySceneHost()


@pytest.fixture
def restore_logging(monkeypatch: pytest.MonkeyPatch):
    """Undo root-logger, context and excepthook changes made by setup_logging()."""
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
    logging_config.pop_context()
    logging.captureWarnings(False)

"""Cross-cutting utilities for scripts and tests.

    - Config validation (validators)
    - Atomic I/O and YAML (fs)
    - Unified logging (logging_config)

The geometry kernel never imports from here; utils may import the kernel
for plan and limit types.

Convenience imports:
    from bezier_road.utils import fs, validators
    from bezier_road.utils.logging_config import setup_logging, get_logger
"""

from . import fs
from . import logging_config
from . import validators

__all__ = ["fs", "logging_config", "validators"]

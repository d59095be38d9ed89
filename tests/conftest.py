import logging
import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `solver`, `codegen` and `main` are importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import matplotlib

matplotlib.use("Agg")


@pytest.fixture(autouse=True)
def _reset_package_loggers():
    yield
    # CLI runs attach handlers bound to the captured stderr of that test.
    for name in ("solver", "codegen"):
        logger = logging.getLogger(name)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)

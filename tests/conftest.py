import matplotlib

matplotlib.use("Agg")

import pytest

from energy_scheduler import reference_processes
from scheduler_logging import LoggingFlags


@pytest.fixture
def reference():
    return reference_processes()


@pytest.fixture(autouse=True)
def restore_logging_flags():
    saved = {name: getattr(LoggingFlags, name) for name in LoggingFlags._flag_names()}
    yield
    for name, value in saved.items():
        setattr(LoggingFlags, name, value)

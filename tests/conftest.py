import matplotlib
matplotlib.use("Agg")

import pytest
from task import Task, Core, Platform, Application, Schedule
from logging_config import LoggingFlags


@pytest.fixture(autouse=True)
def quiet_logging():
    """Silence the console flags for the duration of a test."""
    saved = {attr: getattr(LoggingFlags, attr) for attr in dir(LoggingFlags)
             if not attr.startswith('_') and attr.isupper()}
    for attr in saved:
        setattr(LoggingFlags, attr, False)
    yield
    for attr, value in saved.items():
        setattr(LoggingFlags, attr, value)


@pytest.fixture
def two_core_platform():
    return Platform([Core(0, [5.0]), Core(1, [7.0])])


@pytest.fixture
def two_task_application():
    return Application([Task(0, 0), Task(1, 0)])


@pytest.fixture
def two_task_schedule():
    return Schedule(cores=2, tasks=2, mapping=[0, 1], start=[0.0, 1.0], finish=[3.0, 4.0])

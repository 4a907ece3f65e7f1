import numpy as np
from typing import Optional, Tuple
from task import Task, Core, Platform, Application, Schedule
from logging_config import LoggingFlags, log_if

# === Settings ===
default_num_cores = 4
default_num_tasks = 20
default_num_types = 5
default_power_range = (1.0, 10.0)
default_duration_range = (0.5, 5.0)
default_gap_range = (0.0, 1.0)


def _rng(seed) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def generate_platform(n_cores: int = default_num_cores, n_types: int = default_num_types,
                      power_range: Tuple[float, float] = default_power_range, seed=None) -> Platform:
    """Generate cores with a random power value per task type"""
    rng = _rng(seed)
    low, high = power_range
    cores = [Core(i, [round(float(p), 2) for p in rng.uniform(low, high, n_types)])
             for i in range(n_cores)]
    return Platform(cores)


def generate_application(n_tasks: int = default_num_tasks, n_types: int = default_num_types,
                         seed=None) -> Application:
    """Generate tasks of random types"""
    rng = _rng(seed)
    return Application([Task(i, int(rng.integers(0, n_types))) for i in range(n_tasks)])


def generate_schedule(application: Application, n_cores: int = default_num_cores, seed=None,
                      duration_range: Tuple[float, float] = default_duration_range,
                      gap_range: Tuple[float, float] = default_gap_range,
                      jitter: float = 0.0) -> Schedule:
    """
    List-schedule the tasks onto randomly chosen cores.

    Tasks of a core run back to back separated by random idle gaps, so no
    two tasks of one core overlap. A positive `jitter` moves every start
    later and every finish earlier by up to half of it, which produces
    near-simultaneous events for exercising the tolerance of the partition.
    """
    rng = _rng(seed)
    n_tasks = len(application)

    mapping = np.zeros(n_tasks, dtype=int)
    start = np.zeros(n_tasks)
    finish = np.zeros(n_tasks)
    ready = np.zeros(n_cores)

    for i in range(n_tasks):
        core = int(rng.integers(0, n_cores))
        gap = rng.uniform(*gap_range)
        duration = rng.uniform(*duration_range)

        mapping[i] = core
        start[i] = ready[core] + gap
        finish[i] = start[i] + duration
        ready[core] = finish[i]

    if jitter > 0:
        # Intervals only shrink, so tasks of a core never start to overlap
        start += rng.uniform(0.0, jitter / 2, n_tasks)
        finish -= rng.uniform(0.0, jitter / 2, n_tasks)
        finish = np.maximum(finish, start)

    log_if(LoggingFlags.PROFILE_PROGRESS,
           f"Generated schedule: {n_tasks} tasks on {n_cores} cores, span {np.max(finish) if n_tasks else 0.0:.2f}")
    return Schedule(cores=n_cores, tasks=n_tasks, mapping=mapping, start=start, finish=finish)


def generate_instance(n_cores: int = default_num_cores, n_tasks: int = default_num_tasks,
                      n_types: int = default_num_types, seed=None,
                      jitter: float = 0.0) -> Tuple[Platform, Application, Schedule]:
    """Generate a platform, an application and a schedule of it"""
    rng = _rng(seed)
    platform = generate_platform(n_cores, n_types, seed=rng)
    application = generate_application(n_tasks, n_types, seed=rng)
    schedule = generate_schedule(application, n_cores, seed=rng, jitter=jitter)
    return platform, application, schedule

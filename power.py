"""
Dynamic power profiles of scheduled tasks.

Given the power table of a platform and a schedule of the application's
tasks, the routines below compute

- a profile with a variable time step dictated by the moments of power
  switches (`partition`),
- a profile sampled on a uniform time grid (`sample`), and
- an evaluator of the instantaneous power at an arbitrary time (`progress`).

Profiles are dense numpy arrays of shape (time units, cores).
"""

import numpy as np
from typing import List, Optional, Tuple
from task import Platform, Application, Schedule
from logging_config import LoggingFlags, log_if


class Power:
    """
    Power calculator bound to a platform and an application.

    The platform and the application are referenced, not copied; they are
    expected to stay unchanged while the calculator is in use.
    """

    def __init__(self, platform: Platform, application: Application, allow_overlap: bool = True):
        self.platform = platform
        self.application = application
        self.allow_overlap = allow_overlap

        for task in application.tasks:
            if task.type < 0:
                raise ValueError(f"Task {task.id} has negative type {task.type}")
            if task.type != int(task.type):
                raise ValueError(f"Task {task.id} has non-integer type {task.type}")

        for core in platform.cores:
            for kind, value in enumerate(core.power):
                if not (np.isfinite(value) and value >= 0):
                    raise ValueError(f"Core {core.id} has invalid power {value} for type {kind}")

        log_if(LoggingFlags.DISTRIBUTION_DETAILS,
               f"Power calculator initialized: {platform.n_cores} cores, {len(application)} tasks")

    def _check_schedule(self, schedule: Schedule):
        if schedule.cores != self.platform.n_cores:
            raise ValueError(f"Schedule has {schedule.cores} cores, platform has {self.platform.n_cores}")
        if schedule.tasks != len(self.application):
            raise ValueError(f"Schedule has {schedule.tasks} tasks, application has {len(self.application)}")
        schedule.validate(allow_overlap=self.allow_overlap)

    def distribute(self, schedule: Schedule) -> np.ndarray:
        """Return the power consumption of each task on its assigned core"""
        self._check_schedule(schedule)
        return distribute(self.platform, self.application, schedule)

    def partition(self, schedule: Schedule, epsilon: float) -> Tuple[np.ndarray, np.ndarray]:
        """
        Compute a power profile with a variable time step dictated by the
        time moments of power switches.

        Time moments closer than `epsilon` are merged. Returns the profile
        of shape (steps, cores) and the durations of the steps.
        """
        _check_tolerance(epsilon)
        return partition(self.distribute(schedule), schedule, epsilon)

    def sample(self, schedule: Schedule, dt: float, ns: int) -> np.ndarray:
        """
        Compute a power profile with respect to a sampling interval `dt`.

        The required number of samples is specified by `ns`; short schedules
        are extended with zeros while long ones are truncated.
        """
        _check_sampling(dt, ns)
        return sample(self.distribute(schedule), schedule, dt, ns)

    def progress(self, schedule: Schedule) -> 'ProgressEvaluator':
        """Return an evaluator of the power consumption at an arbitrary time moment"""
        return progress(self.distribute(schedule), schedule)


class ProgressEvaluator:
    """
    Instantaneous per-core power of a schedule.

    The per-core task lists are built once at construction and never
    modified afterwards, so one evaluator can serve many calls (including
    concurrent ones, given distinct result buffers).
    """

    def __init__(self, power: np.ndarray, schedule: Schedule):
        self.n_cores = schedule.cores
        self.power = np.array(power, dtype=float)
        # (start, finish, power) of every task of a core, in original order
        self.intervals: List[List[Tuple[float, float, float]]] = [
            [(float(schedule.start[i]), float(schedule.finish[i]), float(self.power[i]))
             for i in schedule.tasks_on(core)]
            for core in range(self.n_cores)
        ]

        log_if(LoggingFlags.PROGRESS_DETAILS,
               f"Progress: task counts per core {[len(m) for m in self.intervals]}")

    def __call__(self, time: float, result: Optional[np.ndarray] = None) -> np.ndarray:
        """
        Write the power of every core at `time` into `result`.

        A task is active on [start, finish], both ends included; when several
        tasks of one core are active, the one listed first wins.
        """
        if result is None:
            result = np.zeros(self.n_cores)
        elif len(result) != self.n_cores:
            raise ValueError(f"Result buffer has {len(result)} entries, expected {self.n_cores}")

        for core, intervals in enumerate(self.intervals):
            result[core] = 0.0
            for start, finish, power in intervals:
                if start <= time <= finish:
                    result[core] = power
                    break

        return result


def _check_tolerance(epsilon: float):
    if not epsilon >= 0:
        raise ValueError(f"Tolerance must be non-negative, got {epsilon}")


def _check_sampling(dt: float, ns: int):
    if not dt > 0:
        raise ValueError(f"Sampling interval must be positive, got {dt}")
    if ns < 0:
        raise ValueError(f"Number of samples must be non-negative, got {ns}")


def distribute(platform: Platform, application: Application, schedule: Schedule) -> np.ndarray:
    """Look up power[core of task][type of task] for every task"""
    power = np.zeros(schedule.tasks)
    for i, j in enumerate(schedule.mapping):
        task = application.tasks[i]
        table = platform.cores[j].power
        if not 0 <= task.type < len(table):
            raise ValueError(f"Task {i} has type {task.type} outside the power table of core {j}")
        power[i] = table[int(task.type)]

    log_if(LoggingFlags.DISTRIBUTION_DETAILS, f"Distributed power: {power}")
    return power


def traverse(points, epsilon: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Merge time points into steps.

    The points are visited in ascending order. A point farther than
    `epsilon` from the last accepted point opens a new step; any other point
    joins the step of the last accepted one.

    Returns the durations of the steps and, for every point in its original
    position, the index of the step it belongs to.
    """
    _check_tolerance(epsilon)

    points = np.asarray(points, dtype=float).reshape(-1)
    n_points = len(points)

    steps = np.zeros(n_points, dtype=int)
    if n_points == 0:
        return np.zeros(0), steps

    if not np.all(np.isfinite(points)):
        raise ValueError("Time points must be finite")

    # order[i] is the original position of the i-th smallest point
    order = np.argsort(points, kind='stable')

    deltas = np.zeros(n_points - 1)
    j = 0
    x = points[order[0]]
    for i in range(1, n_points):
        point = points[order[i]]
        delta = point - x
        if delta > epsilon:
            x = point
            deltas[j] = delta
            j += 1
        steps[order[i]] = j

    log_if(LoggingFlags.TRAVERSAL_DETAILS,
           f"Traverse: {n_points} points merged into {j} steps (epsilon={epsilon})")
    return deltas[:j], steps


def partition(power: np.ndarray, schedule: Schedule, epsilon: float) -> Tuple[np.ndarray, np.ndarray]:
    """Build the (steps x cores) profile; a task fills the steps from its start step up to its finish step"""
    nc, nt = schedule.cores, schedule.tasks

    time = np.concatenate([schedule.start, schedule.finish])
    dT, steps = traverse(time, epsilon)
    ssteps, fsteps = steps[:nt], steps[nt:]

    P = np.zeros((len(dT), nc))

    # Tasks overlapping on one core: the later one overwrites the earlier one
    for i in range(nt):
        P[ssteps[i]:fsteps[i], schedule.mapping[i]] = power[i]

    log_if(LoggingFlags.PARTITION_DETAILS,
           f"Partition: {len(dT)} steps x {nc} cores, total time {np.sum(dT):.4f}")
    return P, dT


def sample(power: np.ndarray, schedule: Schedule, dt: float, ns: int) -> np.ndarray:
    """Build the (ns x cores) profile on the uniform grid k*dt"""
    _check_sampling(dt, ns)
    nc, nt = schedule.cores, schedule.tasks

    P = np.zeros((ns, nc))

    count = int(np.floor(schedule.span / dt))
    if count < ns:
        log_if(LoggingFlags.SAMPLING_DETAILS,
               f"Sample: schedule covers {count} of {ns} samples, the rest stays zero")
        ns = count

    for i in range(nt):
        # Nearest sample, not truncation
        s = max(int(np.floor(schedule.start[i] / dt + 0.5)), 0)
        f = min(int(np.floor(schedule.finish[i] / dt + 0.5)), ns)
        if s < f:
            P[s:f, schedule.mapping[i]] = power[i]

    log_if(LoggingFlags.SAMPLING_DETAILS,
           f"Sample: {P.shape[0]} samples x {nc} cores at dt={dt}")
    return P


def progress(power: np.ndarray, schedule: Schedule) -> ProgressEvaluator:
    return ProgressEvaluator(power, schedule)

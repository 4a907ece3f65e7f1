# Data structures for power profiling of scheduled tasks
import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Tuple
from logging_config import LoggingFlags, log_if


@dataclass
class Task:
    """A task of the application; `type` indexes the cores' power tables"""
    id: int
    type: int

    def __repr__(self):
        return f"Task {self.id}: type={self.type}"


@dataclass
class Core:
    """A processing core with a power value per task type"""
    id: int
    power: List[float]

    def __repr__(self):
        return f"Core {self.id}: power={self.power}"


@dataclass
class Platform:
    """Collection of cores"""
    cores: List[Core]

    @property
    def n_cores(self) -> int:
        return len(self.cores)

    @property
    def power(self) -> List[List[float]]:
        """Power table indexed by [core][task type]"""
        return [core.power for core in self.cores]


@dataclass
class Application:
    """Ordered collection of tasks"""
    tasks: List[Task]

    def __len__(self):
        return len(self.tasks)


@dataclass
class Schedule:
    """
    Concrete schedule: every task is mapped onto a core and has fixed
    start and finish times.
    """
    cores: int
    tasks: int
    mapping: np.ndarray
    start: np.ndarray
    finish: np.ndarray
    span: Optional[float] = None

    def __post_init__(self):
        mapping = np.asarray(self.mapping).reshape(-1)
        if mapping.size and not np.all(np.equal(np.mod(mapping, 1), 0)):
            raise ValueError(f"Core indices must be integers, got {mapping}")
        self.mapping = mapping.astype(int)
        self.start = np.asarray(self.start, dtype=float).reshape(-1)
        self.finish = np.asarray(self.finish, dtype=float).reshape(-1)
        if self.span is None:
            self.span = float(np.max(self.finish)) if len(self.finish) > 0 else 0.0
        else:
            self.span = float(self.span)

    def __repr__(self):
        return f"Schedule: cores={self.cores}, tasks={self.tasks}, span={self.span}"

    def tasks_on(self, core: int) -> List[int]:
        """Indices of the tasks mapped onto `core` in their original order"""
        return [i for i in range(self.tasks) if self.mapping[i] == core]

    def overlaps(self) -> List[Tuple[int, int, int]]:
        """Find (core, i, k) triples of tasks whose [start, finish) intersect on one core"""
        result = []
        for core in range(self.cores):
            indices = sorted(self.tasks_on(core), key=lambda i: self.start[i])
            active = []
            for k in indices:
                active = [i for i in active if self.finish[i] > self.start[k]]
                for i in active:
                    if self.start[i] < self.finish[k]:
                        result.append((core, min(i, k), max(i, k)))
                active.append(k)
        return sorted(result)

    def validate(self, allow_overlap: bool = True):
        """Check the schedule invariants, raising ValueError on the first violation"""
        if self.cores < 0 or self.tasks < 0:
            raise ValueError(f"Negative schedule size: cores={self.cores}, tasks={self.tasks}")

        for name in ('mapping', 'start', 'finish'):
            length = len(getattr(self, name))
            if length != self.tasks:
                raise ValueError(f"Schedule {name} has {length} entries, expected {self.tasks}")

        for i in range(self.tasks):
            core = self.mapping[i]
            if not 0 <= core < self.cores:
                raise ValueError(f"Task {i} is mapped onto core {core}, expected 0 <= core < {self.cores}")
            if not (np.isfinite(self.start[i]) and np.isfinite(self.finish[i])):
                raise ValueError(f"Task {i} has non-finite times: start={self.start[i]}, finish={self.finish[i]}")
            if self.start[i] > self.finish[i]:
                raise ValueError(f"Task {i} starts after it finishes: {self.start[i]} > {self.finish[i]}")

        if not np.isfinite(self.span) or self.span < 0:
            raise ValueError(f"Invalid schedule span: {self.span}")

        overlapping = self.overlaps()
        if overlapping:
            for core, i, k in overlapping:
                log_if(LoggingFlags.VALIDATION_CHECKS,
                       f"Tasks {i} and {k} overlap on core {core}")
            if not allow_overlap:
                core, i, k = overlapping[0]
                raise ValueError(f"Tasks {i} and {k} overlap on core {core}")

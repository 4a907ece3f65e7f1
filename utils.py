import numpy as np
import pandas as pd
from typing import Optional
from tabulate import tabulate
from task import Schedule
from logging_config import LoggingFlags, log_if


def task_energy(power: np.ndarray, schedule: Schedule) -> np.ndarray:
    """Per-core energy computed directly from task durations"""
    energy = np.zeros(schedule.cores)
    for i in range(schedule.tasks):
        energy[schedule.mapping[i]] += (schedule.finish[i] - schedule.start[i]) * power[i]
    return energy


def partition_energy(P: np.ndarray, dT: np.ndarray) -> np.ndarray:
    """Per-core energy of a profile with variable time steps"""
    return np.asarray(dT, dtype=float) @ np.asarray(P, dtype=float)


def sample_energy(P: np.ndarray, dt: float) -> np.ndarray:
    """Per-core energy of a profile sampled every dt"""
    return dt * np.sum(P, axis=0)


def step_times(dT: np.ndarray, origin: float = 0.0) -> np.ndarray:
    """Boundaries of the steps: len(dT) + 1 time moments starting at origin"""
    return origin + np.concatenate([[0.0], np.cumsum(dT)])


def profile_to_dataframe(P: np.ndarray, dT: Optional[np.ndarray] = None,
                         dt: Optional[float] = None, origin: float = 0.0) -> pd.DataFrame:
    """
    Tabulate a power profile, one row per time unit and one column per core.

    Pass `dT` for a partition (variable steps) or `dt` for a sampled profile.
    The index holds the start time of each row.
    """
    if (dT is None) == (dt is None):
        raise ValueError("Exactly one of dT and dt must be given")

    P = np.asarray(P, dtype=float)
    if dT is not None:
        dT = np.asarray(dT, dtype=float)
        if len(dT) != P.shape[0]:
            raise ValueError(f"Profile has {P.shape[0]} rows, but {len(dT)} step durations")
        time = step_times(dT, origin)[:-1]
        duration = dT
    else:
        time = origin + dt * np.arange(P.shape[0])
        duration = np.full(P.shape[0], float(dt))

    df = pd.DataFrame(P, columns=[f'core_{j}' for j in range(P.shape[1])],
                      index=pd.Index(time, name='time'))
    df.insert(0, 'duration', duration)
    return df


def summarize_power_profile(P: np.ndarray, dT: np.ndarray, name: str = "Power profile"):
    """Provide a summary of a partitioned power profile"""
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"\n{'='*60}")
    log_if(LoggingFlags.SOLUTION_ANALYSIS, name.upper())
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"{'='*60}")

    P = np.asarray(P, dtype=float)
    dT = np.asarray(dT, dtype=float)
    total_time = float(np.sum(dT))

    if P.shape[0] == 0:
        log_if(LoggingFlags.SOLUTION_ANALYSIS, "Empty profile!")
        return

    energy = partition_energy(P, dT)
    total_power = np.sum(P, axis=1)

    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Steps: {P.shape[0]}, cores: {P.shape[1]}")
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Duration: {total_time:.4f}")
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Peak total power: {np.max(total_power):.4f}")
    if total_time > 0:
        log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Average total power: {np.sum(energy) / total_time:.4f}")

    table = []
    for j in range(P.shape[1]):
        busy = float(np.sum(dT[P[:, j] > 0]))
        table.append([f"Core {j}", np.max(P[:, j]), energy[j],
                      100.0 * busy / total_time if total_time > 0 else 0.0])
    log_if(LoggingFlags.SOLUTION_ANALYSIS,
           tabulate(table, headers=["Core", "Peak power", "Energy", "Busy %"],
                    tablefmt="grid", floatfmt=".4f"))

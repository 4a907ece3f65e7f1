import os
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as patches
from task import Schedule
from utils import step_times, partition_energy
from logging_config import LoggingFlags, log_if


def _file_name(kind: str, name: str) -> str:
    return f'{kind}_{name.lower().replace(" ", "_")}.png'


def visualize_power_profile(P: np.ndarray, dT: np.ndarray, name: str,
                            save_dir: str = "results", origin: float = 0.0) -> str:
    """Plot a partitioned power profile as one step curve per core"""
    if not os.path.exists(save_dir):
        os.makedirs(save_dir)

    P = np.asarray(P, dtype=float)
    n_cores = P.shape[1]
    times = step_times(dT, origin)
    energy = partition_energy(P, dT)

    fig, axes = plt.subplots(n_cores + 1, 1, figsize=(14, 2.5 * (n_cores + 1)), sharex=True)
    axes = np.atleast_1d(axes)

    for j in range(n_cores):
        ax = axes[j]
        # The last value is repeated so the final step is drawn to its end
        values = np.append(P[:, j], P[-1, j]) if len(P) else np.zeros(1)
        ax.step(times, values, where='post', color='tab:blue')
        ax.fill_between(times, values, step='post', alpha=0.3, color='tab:blue')
        ax.set_title(f'Core {j} (Energy: {energy[j]:.2f})')
        ax.set_ylabel('Power')
        ax.grid(True, alpha=0.3)

    total = np.sum(P, axis=1)
    values = np.append(total, total[-1]) if len(total) else np.zeros(1)
    axes[-1].step(times, values, where='post', color='tab:red')
    axes[-1].set_title(f'Total (Energy: {np.sum(energy):.2f})')
    axes[-1].set_ylabel('Power')
    axes[-1].set_xlabel('Time')
    axes[-1].grid(True, alpha=0.3)

    plt.suptitle(f'Power Profile - {name}', fontsize=16, fontweight='bold')
    plt.tight_layout()
    path = os.path.join(save_dir, _file_name('power_profile', name))
    plt.savefig(path, dpi=150, bbox_inches='tight')
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Power profile saved as '{path}'")
    plt.close(fig)
    return path


def visualize_sampled_profile(P: np.ndarray, dt: float, name: str, save_dir: str = "results") -> str:
    """Plot a sampled power profile as stacked bars, one layer per core"""
    if not os.path.exists(save_dir):
        os.makedirs(save_dir)

    P = np.asarray(P, dtype=float)
    n_samples, n_cores = P.shape
    times = dt * np.arange(n_samples)

    colors = plt.cm.Set3(np.linspace(0, 1, max(n_cores, 1)))

    fig, ax = plt.subplots(figsize=(14, 5))
    bottom = np.zeros(n_samples)
    for j in range(n_cores):
        ax.bar(times, P[:, j], width=dt, bottom=bottom, align='edge',
               color=colors[j], edgecolor='black', linewidth=0.3, label=f'Core {j}')
        bottom += P[:, j]

    ax.set_xlabel('Time')
    ax.set_ylabel('Power')
    ax.set_title(f'Sampled Power - {name} (dt={dt})')
    ax.grid(True, alpha=0.3)
    if n_cores:
        ax.legend(loc='upper right')

    plt.tight_layout()
    path = os.path.join(save_dir, _file_name('sampled_profile', name))
    plt.savefig(path, dpi=150, bbox_inches='tight')
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Sampled profile saved as '{path}'")
    plt.close(fig)
    return path


def visualize_schedule(power: np.ndarray, schedule: Schedule, name: str, save_dir: str = "results") -> str:
    """Visualize the schedule as Gantt chart, tasks shaded by their power"""
    if not os.path.exists(save_dir):
        os.makedirs(save_dir)

    power = np.asarray(power, dtype=float)
    peak = float(np.max(power)) if len(power) else 1.0
    cmap = plt.cm.viridis

    fig, ax = plt.subplots(figsize=(16, 1 + 0.8 * max(schedule.cores, 1)))

    for i in range(schedule.tasks):
        core = schedule.mapping[i]
        duration = schedule.finish[i] - schedule.start[i]
        color = cmap(power[i] / peak if peak > 0 else 0.0)

        rect = patches.Rectangle(
            (schedule.start[i], core - 0.4),
            duration, 0.8,
            linewidth=1, edgecolor='black', facecolor=color, alpha=0.8
        )
        ax.add_patch(rect)
        ax.text(schedule.start[i] + duration / 2, core, f"T{i}",
                ha='center', va='center', fontsize=8, fontweight='bold')

    ax.set_xlim(0, max(schedule.span, 1e-9))
    ax.set_ylim(-0.8, schedule.cores - 0.2)
    ax.set_yticks(range(schedule.cores))
    ax.set_yticklabels([f'Core {j}' for j in range(schedule.cores)])
    ax.set_xlabel('Time')
    ax.grid(True, alpha=0.3)

    sm = plt.cm.ScalarMappable(cmap=cmap, norm=plt.Normalize(0, peak))
    fig.colorbar(sm, ax=ax, label='Power')

    plt.suptitle(f'Schedule Visualization - {name}', fontsize=16, fontweight='bold')
    plt.tight_layout()
    path = os.path.join(save_dir, _file_name('schedule', name))
    plt.savefig(path, dpi=150, bbox_inches='tight')
    log_if(LoggingFlags.SOLUTION_ANALYSIS, f"Schedule visualization saved as '{path}'")
    plt.close(fig)
    return path

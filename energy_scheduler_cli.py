"""
Console front end for the energy-aware scheduling simulator.

Runs HIGH-only, LOW-only and predictive DVFS FCFS on a process batch,
prints per-process tables and a comparison, and draws the energy and
Gantt charts with matplotlib.
"""

from typing import Dict, List, Optional

import matplotlib.pyplot as plt
from matplotlib.patches import Patch

from energy_scheduler import (
    WORKLOAD_THRESHOLD,
    ExperimentResults,
    Process,
    SchedulerError,
    SimulationResult,
    reference_processes,
    run_experiment,
    sample_workloads,
)
from scheduler_logging import LoggingFlags, log_if

# Results of the last run (for the chart menu entries)
LAST_RESULTS: Optional[ExperimentResults] = None

LEVEL_CHARS = {"HIGH": "H", "LOW": "L"}


# ------------------------------
# Pretty Printing Helpers
# ------------------------------

def print_process_table(processes: List[Process]) -> None:
    print("\nProcesses:")
    print("+-------+----------+--------+")
    print("| PID   | Arrival  | Burst  |")
    print("+-------+----------+--------+")
    for p in processes:
        print(f"| {p.pid:<5} | {p.arrival_time:^8} | {p.burst_time:^6} |")
    print("+-------+----------+--------+\n")


def print_result_table(title: str, result: SimulationResult) -> None:
    print(f"=== {title} ===")
    print("+-------+-------+---------+------------+------------+----------+--------------+")
    print("| PID   | Level | Burst   | Completion | Turnaround | Waiting  | Energy (J)   |")
    print("+-------+-------+---------+------------+------------+----------+--------------+")
    for p in result.processes:
        print(
            f"| {p.pid:<5} "
            f"| {p.level:<5} "
            f"| {p.burst_time:>7.2f} "
            f"| {p.completion_time:>10.2f} "
            f"| {p.turnaround_time:>10.2f} "
            f"| {p.waiting_time:>8.2f} "
            f"| {p.energy_consumed:>12.6e} |"
        )
    print("+-------+-------+---------+------------+------------+----------+--------------+")
    print(f"Avg Waiting: {result.average_waiting_time:.2f} | "
          f"Avg Turnaround: {result.average_turnaround_time:.2f}")
    print(f"Makespan: {result.makespan:.2f} | Total Energy: {result.total_energy:.6f} J\n")


def gantt_lines(result: SimulationResult) -> List[str]:
    """Text Gantt: which process ran, and on which level, one char per time unit."""
    timeline = ""
    level_line = ""
    last_end = 0

    for p in result.processes:
        gap = int(round(p.start_time - last_end))
        if gap > 0:
            timeline += " " * gap
            level_line += " " * gap

        run_len = max(1, int(round(p.actual_execution_time)))
        timeline += str(p.pid)[-1] * run_len
        level_line += LEVEL_CHARS.get(p.level, "?") * run_len
        last_end = p.completion_time

    return [timeline, level_line]


def print_gantt(title: str, result: SimulationResult) -> None:
    print(f"\n{title}")
    print("-" * len(title))
    timeline, level_line = gantt_lines(result)
    print("Processes:")
    print(timeline)
    print("Freq lvl:")
    print(level_line)
    print("Legend: H=High freq, L=Low freq, each character ≈ 1 time unit\n")


def print_comparison(experiment: ExperimentResults) -> None:
    high = experiment.high
    print("=== Algorithm Comparison Summary ===")
    print("+-------------------------------+----------+----------+----------+--------------+------------+------------+")
    print("| Algorithm                     | AvgWait  | AvgTAT   | Makespan | Energy (J)   | Saved %    | Slower %   |")
    print("+-------------------------------+----------+----------+----------+--------------+------------+------------+")
    comparisons = experiment.comparisons()
    for label, r in experiment.results().items():
        if r is high:
            saved, slower = 0.0, 0.0
        else:
            saved = comparisons[label].savings_pct
            slower = comparisons[label].slowdown_pct
        print(
            f"| {r.name:<29} "
            f"| {r.average_waiting_time:>8.2f} "
            f"| {r.average_turnaround_time:>8.2f} "
            f"| {r.makespan:>8.2f} "
            f"| {r.total_energy:>12.6e} "
            f"| {saved:>10.2f} "
            f"| {slower:>10.2f} |"
        )
    print("+-------------------------------+----------+----------+----------+--------------+------------+------------+\n")

    print("Quick Summary:")
    for label, c in comparisons.items():
        print(f"- {label}: saved {c.energy_saved:.6f} J ({c.savings_pct:.2f}%), "
              f"{c.slowdown_pct:.2f}% slower than HIGH")

    results = list(experiment.results().values())
    best_energy = min(results, key=lambda r: r.total_energy)
    best_tat = min(results, key=lambda r: r.average_turnaround_time)
    print(f"- Lowest energy: {best_energy.name} ({best_energy.total_energy:.6f} J)")
    print(f"- Best (lowest) average turnaround time: {best_tat.name} "
          f"({best_tat.average_turnaround_time:.2f} units)\n")


# ------------------------------
# Plot Helpers
# ------------------------------

def show_energy_bar_chart(experiment: ExperimentResults) -> None:
    results = list(experiment.results().values())
    names = [r.name for r in results]
    energies = [r.total_energy for r in results]

    plt.figure(figsize=(7, 4))
    bars = plt.bar(names, energies)

    plt.title("Energy Consumption Comparison")
    plt.xlabel("Scheduling Policy")
    plt.ylabel("Total Energy (J)")

    for bar, energy in zip(bars, energies):
        plt.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height(),
            f"{energy:.2e}",
            ha="center",
            va="bottom",
        )

    plt.tight_layout()
    plt.show()


def show_combined_gantt(experiment: ExperimentResults) -> None:
    """
    One Gantt row per policy. Bars are coloured by process, and hatched
    when the process ran on the LOW level.
    """
    results = experiment.results()
    all_pids = sorted({p.pid for r in results.values() for p in r.processes})
    color_cycle = [
        "tab:blue", "tab:orange", "tab:green", "tab:red", "tab:purple",
        "tab:brown", "tab:pink", "tab:gray", "tab:olive", "tab:cyan"
    ]
    pid_colors = {
        pid: color_cycle[i % len(color_cycle)] for i, pid in enumerate(all_pids)
    }

    fig, ax = plt.subplots(figsize=(9, 4))

    names = [r.name for r in results.values()]
    y_positions = list(range(len(names)))

    for y, r in zip(y_positions, results.values()):
        for p in r.processes:
            ax.barh(
                y,
                p.actual_execution_time,
                left=p.start_time,
                height=0.4,
                edgecolor="black",
                align="center",
                color=pid_colors[p.pid],
                hatch="//" if p.level != "HIGH" else None,
            )
            ax.text(
                p.start_time + p.actual_execution_time / 2,
                y,
                str(p.pid),
                ha="center",
                va="center",
                fontsize=8,
            )

    ax.set_yticks(y_positions)
    ax.set_yticklabels(names)
    ax.set_xlabel("Time")
    ax.set_title("Combined Gantt Chart – HIGH vs LOW vs Predictive DVFS")

    handles = [Patch(facecolor=pid_colors[pid], edgecolor="black", label=f"PID {pid}")
               for pid in all_pids]
    handles.append(Patch(facecolor="white", edgecolor="black", hatch="//", label="LOW level"))
    ax.legend(handles=handles, title="Processes", bbox_to_anchor=(1.04, 1), loc="upper left")

    plt.tight_layout()
    plt.show()


def show_trend_charts(labels: List[str], experiments: List[ExperimentResults]) -> None:
    """Energy and average turnaround per policy across several workloads."""
    energy_trends: Dict[str, List[float]] = {}
    tat_trends: Dict[str, List[float]] = {}
    for experiment in experiments:
        for r in experiment.results().values():
            energy_trends.setdefault(r.name, []).append(r.total_energy)
            tat_trends.setdefault(r.name, []).append(r.average_turnaround_time)

    plt.figure(figsize=(6, 4))
    for name, energies in energy_trends.items():
        plt.plot(labels, energies, marker="o", label=name)
    plt.title("Energy vs Workload")
    plt.xlabel("Workload")
    plt.ylabel("Total Energy (J)")
    plt.legend()
    plt.tight_layout()
    plt.show()

    plt.figure(figsize=(6, 4))
    for name, tats in tat_trends.items():
        plt.plot(labels, tats, marker="o", label=name)
    plt.title("Average Turnaround Time vs Workload")
    plt.xlabel("Workload")
    plt.ylabel("Avg Turnaround Time (units)")
    plt.legend()
    plt.tight_layout()
    plt.show()


# ------------------------------
# Input Helper
# ------------------------------

def read_processes_from_user() -> List[Process]:
    print("\nEnter process details.")
    while True:
        try:
            n = int(input("Number of processes: ").strip())
            if n <= 0:
                print("Please enter a positive number.\n")
                continue
            break
        except ValueError:
            print("Please enter a valid integer.\n")

    processes: List[Process] = []
    print("Enter each process as: <PID> <arrival_time> <burst_time>")
    print("Example: 1 0 4")

    for i in range(n):
        while True:
            line = input(f"Process {i+1}: ").strip()
            parts = line.split()
            if len(parts) != 3:
                print("Invalid format. Use: PID arrival burst (3 values). Try again.")
                continue
            try:
                pid = int(parts[0])
                arrival = float(parts[1])
                burst = float(parts[2])
            except ValueError:
                print("PID must be an integer, arrival and burst numbers. Try again.")
                continue
            if arrival < 0 or burst <= 0:
                print("Arrival must be >= 0 and burst > 0. Try again.")
                continue
            if any(p.pid == pid for p in processes):
                print(f"PID {pid} is already used. Try again.")
                continue
            processes.append(Process(pid, arrival, burst))
            break

    return processes


# ------------------------------
# Experiment Runner
# ------------------------------

def run_and_report(
    processes: List[Process], threshold: float = WORKLOAD_THRESHOLD
) -> Optional[ExperimentResults]:
    global LAST_RESULTS

    print_process_table(processes)
    try:
        experiment = run_experiment(processes, threshold)
    except SchedulerError as e:
        print(f"Simulation rejected: {e}\n")
        return None
    LAST_RESULTS = experiment

    titles = {
        "HIGH": "HIGH Frequency (Before DVFS)",
        "LOW": "LOW Frequency (DVFS Applied Globally)",
        "DYNAMIC": f"DYNAMIC Frequency (Workload Prediction, threshold {threshold})",
    }
    for label, result in experiment.results().items():
        print_result_table(titles[label], result)
        print_gantt(f"Gantt – {result.name}", result)

    print_comparison(experiment)
    return experiment


def run_multi_trend_sample() -> None:
    print("\nRunning trend charts on SAMPLE workloads...")
    labels = []
    experiments = []
    for label, procs in sample_workloads():
        labels.append(label)
        experiments.append(run_experiment(procs))

    try:
        show_trend_charts(labels, experiments)
    except Exception as e:
        print("Could not display trend charts:", e)
    print("Finished trend charts for sample workloads.\n")


# ------------------------------
# Main Menu
# ------------------------------

def main() -> None:
    print("=" * 60)
    print("        ENERGY EFFICIENT CPU SCHEDULING SIMULATOR")
    print("=" * 60)
    print("Compares FCFS at HIGH and LOW frequency with a")
    print("workload-predicting DVFS scheduler.\n")

    while True:
        log_if(LoggingFlags.MAIN_MENU, "Menu:")
        log_if(LoggingFlags.MAIN_MENU, "  1. Run reference processes")
        log_if(LoggingFlags.MAIN_MENU, "  2. Enter custom processes")
        log_if(LoggingFlags.MAIN_MENU, "  3. Energy bar chart (last run)")
        log_if(LoggingFlags.MAIN_MENU, "  4. Combined Gantt chart (last run)")
        log_if(LoggingFlags.MAIN_MENU, "  5. Trend charts (sample workloads)")
        log_if(LoggingFlags.MAIN_MENU, "  6. Toggle debug trace")
        log_if(LoggingFlags.MAIN_MENU, "  7. Exit")
        choice = input("Choose an option (1–7): ").strip()

        if choice == "1":
            print("\nUsing reference processes.")
            run_and_report(reference_processes())

        elif choice == "2":
            run_and_report(read_processes_from_user())

        elif choice in ("3", "4"):
            if LAST_RESULTS is None:
                print("No results available yet. Run an experiment first (option 1 or 2).\n")
                continue
            chart = show_energy_bar_chart if choice == "3" else show_combined_gantt
            try:
                chart(LAST_RESULTS)
            except Exception as e:
                print("Could not display chart:", e)

        elif choice == "5":
            run_multi_trend_sample()

        elif choice == "6":
            if LoggingFlags.debug_enabled():
                LoggingFlags.disable_all_debug()
                print("Debug trace off.\n")
            else:
                LoggingFlags.enable_all_debug()
                print("Debug trace on.\n")

        elif choice == "7":
            print("Exiting simulator. Goodbye!")
            break

        else:
            print("Invalid choice. Please enter a number between 1 and 7.\n")


if __name__ == "__main__":
    main()

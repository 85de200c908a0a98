"""
Energy-aware FCFS scheduling with DVFS.

Simulates a non-preemptive first-come-first-served schedule for a batch of
processes at a fixed operating point (HIGH or LOW) or with a
workload-predicting frequency choice, and reports timing and energy for
each process plus the run as a whole.
"""

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Dict, Iterable, List, Sequence, Tuple, Union

from dvfs_levels import DEFAULT_DVFS_TABLE, HIGH, LOW, DVFSTable, OperatingPoint
from scheduler_logging import LoggingFlags, log_if

HIGH_LEVEL = HIGH
LOW_LEVEL = LOW

# Remaining burst time above which the predictive scheduler stays on HIGH.
WORKLOAD_THRESHOLD = 15


# ------------------------------
# Errors
# ------------------------------

class SchedulerError(ValueError):
    """Base class for rejected simulation inputs."""


class InvalidPolicyError(SchedulerError):
    def __init__(self, policy_name, table: DVFSTable):
        self.policy_name = policy_name
        super().__init__(
            f"Unknown DVFS level {policy_name!r}; expected one of: {', '.join(table)}"
        )


class EmptyProcessListError(SchedulerError):
    def __init__(self):
        super().__init__("Cannot simulate an empty process list")


class InvalidProcessError(SchedulerError):
    def __init__(self, problems: List[str]):
        self.problems = problems
        super().__init__("Invalid process batch: " + "; ".join(problems))


# ------------------------------
# Data Models
# ------------------------------

@dataclass(frozen=True)
class Process:
    pid: int
    arrival_time: float
    burst_time: float


@dataclass(frozen=True)
class ProcessResult:
    pid: int
    arrival_time: float
    burst_time: float
    level: str
    start_time: float
    actual_execution_time: float
    completion_time: float
    turnaround_time: float
    waiting_time: float
    energy_consumed: float


@dataclass(frozen=True)
class SimulationResult:
    name: str
    average_waiting_time: float
    average_turnaround_time: float
    makespan: float
    total_energy: float
    processes: Tuple[ProcessResult, ...]

    @property
    def levels_used(self) -> Tuple[str, ...]:
        return tuple(p.level for p in self.processes)

    @property
    def cpu_utilization(self) -> float:
        """Busy time over the span from the first arrival to the makespan."""
        busy = sum(p.actual_execution_time for p in self.processes)
        span = self.makespan - min(p.arrival_time for p in self.processes)
        return busy / span if span > 0 else 0.0


@dataclass(frozen=True)
class Comparison:
    energy_saved: float
    savings_pct: float
    slowdown_pct: float

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)


ProcessLike = Union[Process, Mapping]


# ------------------------------
# Input Validation
# ------------------------------

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_process(item: ProcessLike, position: int) -> Process:
    if isinstance(item, Process):
        return item
    if isinstance(item, Mapping):
        pid = item.get("id", item.get("pid"))
        try:
            return Process(pid, item["arrival_time"], item["burst_time"])
        except KeyError as e:
            raise InvalidProcessError([f"entry {position} has no {e.args[0]!r}"]) from e
    raise InvalidProcessError([f"entry {position} is not a process: {item!r}"])


def validate_processes(processes: Iterable[ProcessLike]) -> List[Process]:
    """
    Check a whole batch before anything is simulated.

    Returns the batch as Process records in input order. Every problem in
    the batch is reported in a single InvalidProcessError.
    """
    items = list(processes)
    if not items:
        raise EmptyProcessListError()

    problems: List[str] = []
    procs: List[Process] = []
    for i, item in enumerate(items):
        try:
            procs.append(_as_process(item, i))
        except InvalidProcessError as e:
            problems.extend(e.problems)

    seen = set()
    for p in procs:
        if p.pid is None:
            problems.append("process without an id")
        elif not isinstance(p.pid, int) or isinstance(p.pid, bool):
            problems.append(f"pid must be an integer, got {p.pid!r}")
        elif p.pid in seen:
            problems.append(f"duplicate pid {p.pid}")
        else:
            seen.add(p.pid)

        if not _is_number(p.arrival_time) or not p.arrival_time >= 0:
            problems.append(f"pid {p.pid}: arrival_time must be >= 0, got {p.arrival_time!r}")
        if not _is_number(p.burst_time) or not p.burst_time > 0:
            problems.append(f"pid {p.pid}: burst_time must be > 0, got {p.burst_time!r}")

    if problems:
        raise InvalidProcessError(problems)
    return procs


# ------------------------------
# Scheduler Base Class
# ------------------------------

class SchedulerBase:
    """
    Non-preemptive FCFS over a process batch.

    Subclasses only decide which DVFS level each process runs at; the
    timing and energy arithmetic is shared.
    """

    name: str = "BaseScheduler"

    def __init__(self, table: DVFSTable = DEFAULT_DVFS_TABLE):
        self.table = table

    def select_level(self, remaining_work: float) -> str:
        raise NotImplementedError("Subclasses must implement select_level()")

    def run(self, processes: Sequence[ProcessLike]) -> SimulationResult:
        procs = sorted(validate_processes(processes), key=lambda p: p.arrival_time)

        current_time = 0
        total_energy = 0
        total_wait = 0
        total_tat = 0
        results: List[ProcessResult] = []

        for idx, p in enumerate(procs):
            if current_time < p.arrival_time:
                log_if(LoggingFlags.SCHEDULE_STEPS,
                       f"[{self.name}] CPU idle {current_time} -> {p.arrival_time}")
                current_time = p.arrival_time

            # front-to-back sum at every step; other orders round differently
            total_remaining = sum(x.burst_time for x in procs[idx:])

            level_name = self.select_level(total_remaining)
            level = self.table[level_name]
            log_if(LoggingFlags.FREQUENCY_DECISIONS,
                   f"[{self.name}] pid {p.pid}: remaining work {total_remaining} -> {level_name}")

            result = self._execute(p, level, current_time)
            results.append(result)

            total_energy += result.energy_consumed
            total_wait += result.waiting_time
            total_tat += result.turnaround_time
            current_time = result.completion_time

        n = len(procs)
        sim = SimulationResult(
            name=self.name,
            average_waiting_time=total_wait / n,
            average_turnaround_time=total_tat / n,
            makespan=current_time,
            total_energy=total_energy,
            processes=tuple(results),
        )
        log_if(LoggingFlags.RUN_SUMMARY,
               f"[{self.name}] makespan={sim.makespan:.2f} energy={sim.total_energy:.6e}")
        return sim

    def _execute(self, p: Process, level: OperatingPoint, start: float) -> ProcessResult:
        power = level.power
        exec_time = p.burst_time * (self.table.reference_frequency / level.frequency)
        energy = power * exec_time

        completion = start + exec_time
        turnaround = completion - p.arrival_time
        # Measured against the nominal burst, so frequency slowdown counts as waiting.
        waiting = turnaround - p.burst_time

        log_if(LoggingFlags.SCHEDULE_STEPS,
               f"[{self.name}] pid {p.pid}: {start} -> {completion} on {level.name}")
        log_if(LoggingFlags.ENERGY_CALCULATION,
               f"[{self.name}] pid {p.pid}: power={power:.6e} x {exec_time} = {energy:.6e}")

        return ProcessResult(
            pid=p.pid,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            level=level.name,
            start_time=start,
            actual_execution_time=exec_time,
            completion_time=completion,
            turnaround_time=turnaround,
            waiting_time=waiting,
            energy_consumed=energy,
        )


# ------------------------------
# Fixed Frequency Scheduler
# ------------------------------

class FixedFrequencyScheduler(SchedulerBase):
    """FCFS with every process on the same DVFS level."""

    def __init__(self, policy_name: str, table: DVFSTable = DEFAULT_DVFS_TABLE):
        if policy_name not in table:
            raise InvalidPolicyError(policy_name, table)
        super().__init__(table)
        self.policy_name = policy_name
        self.name = f"FCFS ({policy_name} Frequency)"

    def select_level(self, remaining_work: float) -> str:
        return self.policy_name


# ------------------------------
# Predictive DVFS Scheduler
# ------------------------------

class PredictiveDVFSScheduler(SchedulerBase):
    """
    FCFS that looks at the work still queued (current process included):
    HIGH while it exceeds the threshold, LOW once it drops to it or below.
    """

    name = "FCFS + Predictive DVFS"

    def __init__(
        self,
        threshold: float = WORKLOAD_THRESHOLD,
        table: DVFSTable = DEFAULT_DVFS_TABLE,
    ):
        super().__init__(table)
        self.threshold = threshold

    def select_level(self, remaining_work: float) -> str:
        return HIGH_LEVEL if remaining_work > self.threshold else LOW_LEVEL


# ------------------------------
# Public Operations
# ------------------------------

def run_fixed(
    processes: Sequence[ProcessLike],
    policy_name: str,
    table: DVFSTable = DEFAULT_DVFS_TABLE,
) -> SimulationResult:
    return FixedFrequencyScheduler(policy_name, table).run(processes)


def run_adaptive(
    processes: Sequence[ProcessLike],
    threshold: float = WORKLOAD_THRESHOLD,
    table: DVFSTable = DEFAULT_DVFS_TABLE,
) -> SimulationResult:
    return PredictiveDVFSScheduler(threshold, table).run(processes)


def compare(high: SimulationResult, other: SimulationResult) -> Comparison:
    """Energy saved and slowdown of `other` relative to the HIGH run."""
    energy_saved = high.total_energy - other.total_energy
    return Comparison(
        energy_saved=energy_saved,
        savings_pct=energy_saved / high.total_energy * 100,
        slowdown_pct=(other.makespan - high.makespan) / high.makespan * 100,
    )


# ------------------------------
# Experiment Runner
# ------------------------------

@dataclass(frozen=True)
class ExperimentResults:
    high: SimulationResult
    low: SimulationResult
    adaptive: SimulationResult

    def results(self) -> Dict[str, SimulationResult]:
        return {"HIGH": self.high, "LOW": self.low, "DYNAMIC": self.adaptive}

    def comparisons(self) -> Dict[str, Comparison]:
        return {
            "LOW": compare(self.high, self.low),
            "DYNAMIC": compare(self.high, self.adaptive),
        }


def run_experiment(
    processes: Sequence[ProcessLike],
    threshold: float = WORKLOAD_THRESHOLD,
    table: DVFSTable = DEFAULT_DVFS_TABLE,
) -> ExperimentResults:
    """Run HIGH-only, LOW-only and predictive DVFS on the same batch."""
    procs = validate_processes(processes)
    return ExperimentResults(
        high=run_fixed(procs, HIGH_LEVEL, table),
        low=run_fixed(procs, LOW_LEVEL, table),
        adaptive=run_adaptive(procs, threshold, table),
    )


# ------------------------------
# Sample Workloads
# ------------------------------

def reference_processes() -> List[Process]:
    return [
        Process(1, 0, 6),
        Process(2, 0, 8),
        Process(3, 0, 7),
        Process(4, 0, 3),
    ]


def sample_workloads() -> List[Tuple[str, List[Process]]]:
    """Small / medium / heavy batches for the trend charts."""
    return [
        (
            "Small",
            [
                Process(1, 0, 4),
                Process(2, 1, 5),
                Process(3, 2, 3),
                Process(4, 4, 2),
            ],
        ),
        (
            "Medium",
            [
                Process(1, 0, 3),
                Process(2, 2, 6),
                Process(3, 4, 4),
                Process(4, 6, 5),
                Process(5, 8, 2),
            ],
        ),
        (
            "Heavy",
            [
                Process(1, 0, 5),
                Process(2, 1, 7),
                Process(3, 3, 6),
                Process(4, 5, 4),
                Process(5, 6, 3),
                Process(6, 8, 2),
            ],
        ),
    ]

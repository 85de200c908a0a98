"""
DVFS operating points.

A DVFSTable maps a level name (HIGH, LOW, ...) to the frequency, voltage
and capacitance constant the CPU runs at on that level. The table is
read-only once built and is handed to the schedulers explicitly.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator

# Converts C * V^2 * f into the energy unit shown in the result tables.
POWER_SCALE = 1e-9

HIGH = "HIGH"
LOW = "LOW"


# ------------------------------
# Operating Point
# ------------------------------

@dataclass(frozen=True)
class OperatingPoint:
    name: str
    frequency: float  # MHz
    voltage: float    # V
    capacitance: float

    def __post_init__(self):
        for attr in ("frequency", "voltage", "capacitance"):
            if getattr(self, attr) <= 0:
                raise ValueError(f"{self.name}: {attr} must be > 0")

    @property
    def power(self) -> float:
        return self.capacitance * self.voltage ** 2 * self.frequency * POWER_SCALE


# ------------------------------
# Frequency Policy Table
# ------------------------------

class DVFSTable(Mapping):
    """Read-only lookup from level name to OperatingPoint.

    Must hold at least a HIGH and a LOW point. HIGH's frequency is the
    reference frequency that burst times are measured against.
    """

    def __init__(self, points: Iterable[OperatingPoint]):
        levels: Dict[str, OperatingPoint] = {}
        for point in points:
            if point.name in levels:
                raise ValueError(f"Duplicate operating point: {point.name}")
            levels[point.name] = point

        missing = [name for name in (HIGH, LOW) if name not in levels]
        if missing:
            raise ValueError(f"DVFS table is missing level(s): {', '.join(missing)}")

        self._levels = MappingProxyType(levels)

    def __getitem__(self, name: str) -> OperatingPoint:
        return self._levels[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._levels)

    def __len__(self) -> int:
        return len(self._levels)

    def __repr__(self) -> str:
        return f"DVFSTable({list(self._levels.values())!r})"

    @property
    def reference_frequency(self) -> float:
        return self._levels[HIGH].frequency

    def scale_factor(self, name: str) -> float:
        """How much longer a burst takes on `name` than at the reference frequency."""
        return self.reference_frequency / self._levels[name].frequency


DEFAULT_DVFS_TABLE = DVFSTable(
    [
        OperatingPoint(HIGH, frequency=2000, voltage=1.2, capacitance=10),
        OperatingPoint(LOW, frequency=1000, voltage=0.8, capacitance=10),
    ]
)

REFERENCE_FREQUENCY = DEFAULT_DVFS_TABLE.reference_frequency

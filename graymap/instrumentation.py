"""
Access counters and timing for performance experiments.

An Instrumentation object is injected into the buffers it should observe.
Buffers created without one share NULL_INSTRUMENTATION, which ignores every
increment, so counting never affects results.

Usage:
    instr = Instrumentation()
    instr.calibrate()
    img = PixelBuffer(640, 480, instrumentation=instr)
    instr.reset()
    ...
    instr.report()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field

from .config import CALIBRATION_LOOPS, PIXMEM_COUNTER

logger = logging.getLogger(__name__)


@dataclass
class Instrumentation:
    """Named counters plus a calibrated wall-clock timer.

    Attributes:
        names: Counter names, in report order. The first is always pixmem.
        time_unit: Seconds taken by one calibration loop; 0.0 until calibrated.
    """

    names: tuple[str, ...] = (PIXMEM_COUNTER,)
    time_unit: float = 0.0
    _counts: dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _started: float = field(default_factory=time.perf_counter, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def __post_init__(self) -> None:
        self._counts = {name: 0 for name in self.names}

    def increment(self, name: str, n: int = 1) -> None:
        with self._lock:
            self._counts[name] = self._counts.get(name, 0) + n

    def count(self, name: str = PIXMEM_COUNTER) -> int:
        with self._lock:
            return self._counts.get(name, 0)

    def snapshot(self) -> dict[str, int]:
        """Return a copy of all counters."""
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        """Zero every counter and restart the timer."""
        with self._lock:
            for name in self._counts:
                self._counts[name] = 0
            self._started = time.perf_counter()

    def elapsed(self) -> float:
        """Seconds since the last reset."""
        return time.perf_counter() - self._started

    def calibrate(self, loops: int = CALIBRATION_LOOPS) -> float:
        """Measure the cost of a trivial loop, used as the report's time unit."""
        if loops <= 0:
            raise ValueError(f"loops must be positive, got {loops}")
        start = time.perf_counter()
        acc = 0
        for i in range(loops):
            acc += i
        self.time_unit = (time.perf_counter() - start) / loops
        logger.debug("Calibrated time unit: %.3e s per loop", self.time_unit)
        return self.time_unit

    def report(self) -> dict[str, float]:
        """Log elapsed time and counters; return them as a dict."""
        elapsed = self.elapsed()
        values: dict[str, float] = {"time": elapsed}
        if self.time_unit > 0:
            values["caltime"] = elapsed / self.time_unit
        values.update(self.snapshot())
        logger.info(
            "%s",
            "  ".join(f"{name}={value:g}" for name, value in values.items()),
        )
        return values


class _NullInstrumentation(Instrumentation):
    """Instrumentation that records nothing."""

    def increment(self, name: str, n: int = 1) -> None:
        return None


NULL_INSTRUMENTATION: Instrumentation = _NullInstrumentation()

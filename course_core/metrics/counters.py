"""
Course metrics: tick counters, deferred-tick streaks and per-gate stats.

Tracks:
- Ticks processed and ticks deferred while the vehicle is missing
- The current and longest run of consecutive deferred ticks
- Skip reasons (vehicle or marker not resolvable)
- Per gate: frame updates, width range and terminal outcome

Gates are keyed by their course index, so one collector serves one course.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, asdict, replace
from typing import Dict, Optional

from course_core.proto import GateState

logger = logging.getLogger(__name__)


@dataclass
class GateStats:
    """
    Running statistics for one gate.

    Attributes:
        updates: Successful frame updates
        min_width: Smallest width seen (m)
        max_width: Largest width seen (m)
        last_width: Width after the latest update (m)
        outcome: Terminal state name, None while the gate is open
        outcome_tick: Tick on which the outcome was reached
    """

    updates: int = 0
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    last_width: Optional[float] = None
    outcome: Optional[str] = None
    outcome_tick: Optional[int] = None

    def record_width(self, width: float):
        self.updates += 1
        self.last_width = width
        self.min_width = width if self.min_width is None else min(self.min_width, width)
        self.max_width = width if self.max_width is None else max(self.max_width, width)


@dataclass
class MetricsSnapshot:
    """Copy of the collector state at one moment."""

    counters: Dict[str, int]
    skip_reasons: Dict[str, int]
    gates: Dict[int, GateStats]
    deferred_streak: int
    longest_deferred_streak: int

    def outcome_counts(self) -> Dict[str, int]:
        """Number of gates per outcome; gates without one count as OPEN."""
        counts = {'CROSSED': 0, 'INVALID': 0, 'OPEN': 0}
        for stats in self.gates.values():
            counts[stats.outcome or 'OPEN'] += 1
        return counts

    def to_dict(self) -> dict:
        return {
            'counters': dict(self.counters),
            'skip_reasons': dict(self.skip_reasons),
            'gates': {index: asdict(stats) for index, stats in self.gates.items()},
            'deferred_streak': self.deferred_streak,
            'longest_deferred_streak': self.longest_deferred_streak,
        }


class MetricsCollector:
    """
    Thread-safe course metrics.

    Usage:
        collector = MetricsCollector()
        collector.record_tick(deferred=False)
        collector.record_gate_update(0, 4.0)
        collector.record_gate_outcome(0, GateState.CROSSED, tick=12)

        print(collector.snapshot().outcome_counts())
    """

    SKIP_REASONS = {
        'vehicle_unresolved': 'Vehicle entity not present in the world',
        'marker_unresolved': 'Gate marker entity not present in the world',
    }

    COUNTERS = (
        'ticks',
        'ticks_deferred',
        'gate_updates',
        'gate_classifications',
        'gates_crossed',
        'gates_invalidated',
    )

    def __init__(self):
        self._lock = threading.Lock()
        self._clear()

    def _clear(self):
        self._counters: Dict[str, int] = defaultdict(int, {name: 0 for name in self.COUNTERS})
        self._skip_reasons: Dict[str, int] = {reason: 0 for reason in self.SKIP_REASONS}
        self._gates: Dict[int, GateStats] = defaultdict(GateStats)
        self._deferred_streak = 0
        self._longest_deferred_streak = 0

    def increment(self, counter_name: str, value: int = 1):
        with self._lock:
            self._counters[counter_name] += value

    def increment_skip(self, reason: str):
        """
        Count a skipped tick or gate update.

        Args:
            reason: Skip reason code (should be in SKIP_REASONS)
        """
        if reason not in self.SKIP_REASONS:
            logger.warning(f"Unknown skip reason '{reason}'")

        with self._lock:
            self._skip_reasons[reason] = self._skip_reasons.get(reason, 0) + 1

    def record_tick(self, deferred: bool):
        """
        Count one tracker tick.

        Args:
            deferred: True if the tick did nothing because the vehicle was
                missing; consecutive deferred ticks form a streak
        """
        with self._lock:
            self._counters['ticks'] += 1
            if deferred:
                self._counters['ticks_deferred'] += 1
                self._deferred_streak += 1
                self._longest_deferred_streak = max(
                    self._longest_deferred_streak, self._deferred_streak
                )
            else:
                self._deferred_streak = 0

    def record_gate_update(self, gate_index: int, width: float):
        """Count a successful frame update and track the gate's width."""
        with self._lock:
            self._counters['gate_updates'] += 1
            self._gates[gate_index].record_width(width)

    def record_gate_outcome(self, gate_index: int, state: GateState, tick: int):
        """
        Record a gate reaching CROSSED or INVALID.

        Raises:
            ValueError: If state is not terminal
        """
        if not state.is_terminal:
            raise ValueError(f"Gate outcome must be terminal: {state.name}")

        with self._lock:
            stats = self._gates[gate_index]
            stats.outcome = state.name
            stats.outcome_tick = tick
            if state == GateState.CROSSED:
                self._counters['gates_crossed'] += 1
            else:
                self._counters['gates_invalidated'] += 1

    def get_counter(self, counter_name: str) -> int:
        with self._lock:
            return self._counters.get(counter_name, 0)

    def get_skip_count(self, reason: str) -> int:
        with self._lock:
            return self._skip_reasons.get(reason, 0)

    def get_gate_stats(self, gate_index: int) -> Optional[GateStats]:
        """Copy of one gate's stats, None if the gate was never recorded."""
        with self._lock:
            stats = self._gates.get(gate_index)
            return replace(stats) if stats is not None else None

    @property
    def deferred_streak(self) -> int:
        with self._lock:
            return self._deferred_streak

    @property
    def longest_deferred_streak(self) -> int:
        with self._lock:
            return self._longest_deferred_streak

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(
                counters=dict(self._counters),
                skip_reasons=dict(self._skip_reasons),
                gates={index: replace(stats) for index, stats in self._gates.items()},
                deferred_streak=self._deferred_streak,
                longest_deferred_streak=self._longest_deferred_streak,
            )

    def reset(self):
        with self._lock:
            self._clear()

    def print_summary(self):
        """Print ticks, skips and a per-gate table."""
        snapshot = self.snapshot()
        counters = snapshot.counters

        print("\n" + "=" * 60)
        print("               COURSE METRICS")
        print("=" * 60)
        print(f"Ticks: {counters['ticks']}  deferred: {counters['ticks_deferred']}  "
              f"longest deferred streak: {snapshot.longest_deferred_streak}")
        print(f"Gate updates: {counters['gate_updates']}  "
              f"classifications: {counters['gate_classifications']}")

        skipped = {r: n for r, n in snapshot.skip_reasons.items() if n}
        if skipped:
            print("Skips:")
            for reason, count in sorted(skipped.items()):
                print(f"  {reason:20s}: {count:6d}")

        if snapshot.gates:
            print("Gates:")
            for index in sorted(snapshot.gates):
                stats = snapshot.gates[index]
                outcome = stats.outcome or 'OPEN'
                if stats.outcome_tick is not None:
                    outcome += f" @ tick {stats.outcome_tick}"
                if stats.updates:
                    widths = f"width {stats.min_width:.3f}..{stats.max_width:.3f}"
                else:
                    widths = "width n/a"
                print(f"  gate {index}: updates={stats.updates:5d}  {widths}  {outcome}")

        outcomes = snapshot.outcome_counts()
        print(f"Crossed: {outcomes['CROSSED']}  Invalid: {outcomes['INVALID']}  "
              f"Open: {outcomes['OPEN']}")
        print("=" * 60 + "\n")

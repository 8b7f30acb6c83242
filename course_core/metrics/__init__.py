"""
Metrics Module: Tick counters and per-gate stats.

- Counters: ticks, deferred ticks, gate updates, crossings, invalidations
- Skip reasons: no silent deferrals, every skipped tick/gate has a code
- Streaks: current and longest run of deferred ticks
- Gates: width range and terminal outcome per course index

Usage:
    from course_core.metrics import get_metrics

    metrics = get_metrics()
    metrics.record_tick(deferred=True)
    metrics.increment_skip('vehicle_unresolved')
    metrics.record_gate_update(0, 4.0)
"""

from .counters import MetricsCollector, MetricsSnapshot, GateStats

# Global singleton for easy access
_global_metrics = None


def get_metrics() -> MetricsCollector:
    """
    Get the global metrics collector singleton.

    Returns:
        MetricsCollector instance
    """
    global _global_metrics
    if _global_metrics is None:
        _global_metrics = MetricsCollector()
    return _global_metrics


def reset_metrics():
    """Reset global metrics (for testing)."""
    global _global_metrics
    _global_metrics = MetricsCollector()


__all__ = ['MetricsCollector', 'MetricsSnapshot', 'GateStats', 'get_metrics', 'reset_metrics']

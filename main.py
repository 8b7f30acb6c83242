"""
Course tracker scenario replay.

Drives a CourseTracker through a recorded scenario: a course definition,
initial entity poses and a list of ticks. Each tick maps entity IDs to new
poses (a null pose removes the entity) and is applied before one tracker
update.

    python main.py scenarios/three_gate_course.json --debug
"""

import sys
import json
import logging
import argparse
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import config
from course_core.proto import GateEvent
from course_core.world import InMemoryWorld
from course_core.domain import (
    CourseConfig,
    CourseSetupError,
    CourseTracker,
    GateEventSink,
    setup_course,
)
from course_core.metrics import get_metrics

logger = logging.getLogger(__name__)


def load_scenario(path: Union[str, Path]) -> Dict:
    """
    Load a scenario JSON file.

    Raises:
        CourseSetupError: If the file cannot be read or parsed
    """
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as f:
            scenario = json.load(f)
    except OSError as e:
        raise CourseSetupError(f"Unable to read scenario {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CourseSetupError(f"Malformed scenario {path}: {e}") from e

    if not isinstance(scenario, dict) or 'course' not in scenario:
        raise CourseSetupError(f"Unable to find <course> element in scenario {path}")
    return scenario


def apply_tick(world: InMemoryWorld, updates: Dict):
    """
    Apply one tick of entity updates; None removes the entity.

    Raises:
        CourseSetupError: If a pose cannot be parsed
    """
    for entity_id, pose in updates.items():
        if pose is None:
            world.remove_entity(entity_id)
            continue
        try:
            world.set_entity_pose(entity_id, pose)
        except ValueError as e:
            raise CourseSetupError(f"Invalid pose for entity [{entity_id}]: {e}") from e


def run_scenario(
    scenario: Dict,
    notify: Optional[GateEventSink] = None
) -> Tuple[Optional[CourseTracker], List[GateEvent]]:
    """
    Replay a scenario.

    Args:
        scenario: Dict with 'course', optional 'entities' and 'ticks'
        notify: Optional event callback passed to the tracker

    Returns:
        (tracker, events); tracker is None if the course failed setup or a
        scenario pose could not be parsed (events holds those already emitted)
    """
    try:
        course = CourseConfig.from_dict(scenario['course'])
    except CourseSetupError as e:
        logger.error(str(e))
        logger.error("Score has been disabled")
        return None, []

    world = InMemoryWorld()
    try:
        apply_tick(world, scenario.get('entities') or {})
    except CourseSetupError as e:
        logger.error(str(e))
        logger.error("Score has been disabled")
        return None, []

    tracker = setup_course(course, world, notify=notify)
    if tracker is None:
        return None, []

    events = []
    for updates in scenario.get('ticks', []):
        try:
            apply_tick(world, updates or {})
        except CourseSetupError as e:
            logger.error(f"Tick {tracker.tick_count + 1}: {e}")
            logger.error("Score has been disabled")
            return None, events
        events.extend(tracker.update())

    return tracker, events


def print_event(event: GateEvent):
    """Print a gate event to the console."""
    print(f"[tick {event.tick:4d}] gate {event.gate_index} "
          f"({event.left_marker}, {event.right_marker}): {event.message}")


def print_status(tracker: CourseTracker):
    """Print the final course status."""
    status = tracker.status()

    print("\n" + "=" * 60)
    print("               COURSE STATUS")
    print("=" * 60)
    print(f"Vehicle: {status['vehicle']} (resolved={status['vehicle_resolved']})")
    print(f"Ticks: {status['tick']}")
    for gate in status['gates']:
        print(f"  gate {gate['index']}: {gate['left_marker']:>12s} / "
              f"{gate['right_marker']:<12s} width={gate['width']:7.3f}  "
              f"state={gate['state']}")
    print(f"Crossed: {status['crossed']}  Invalid: {status['invalid']}  "
          f"Complete: {status['complete']}")
    print("=" * 60)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Replay a navigation course scenario')
    parser.add_argument('scenario', nargs='?', default=None,
                        help='Scenario JSON file (default: built-in two-gate course)')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--json', action='store_true',
                        help='Print final status as JSON')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Do not print gate events')
    parser.add_argument('--metrics', action='store_true',
                        help='Print metrics summary')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOGGING_CONFIG["level"]),
        format=config.LOGGING_CONFIG["format"]
    )
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.scenario:
        try:
            scenario = load_scenario(args.scenario)
        except CourseSetupError as e:
            logger.error(str(e))
            return 1
    else:
        scenario = config.DEFAULT_SCENARIO

    print_events = config.TRACKER_CONFIG["print_events"] and not args.quiet
    tracker, _ = run_scenario(scenario, notify=print_event if print_events else None)
    if tracker is None:
        return 1

    if args.json:
        print(json.dumps(tracker.status(), indent=2))
    else:
        print_status(tracker)

    if args.metrics or config.TRACKER_CONFIG["print_metrics"]:
        get_metrics().print_summary()

    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Course tracker driver configuration.
"""

# Logging
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

# Tracker output
TRACKER_CONFIG = {
    "print_events": True,       # Print each gate event to the console
    "print_metrics": False,     # Print the metrics summary after replay
}

# Scenario replayed when no file is given
DEFAULT_SCENARIO = {
    "course": {
        "vehicle": "wamv",
        "gates": [
            {"left_marker": "red_0", "right_marker": "green_0"},
            {"left_marker": "red_1", "right_marker": "green_1"},
        ],
    },
    "entities": {
        "red_0": [10.0, -3.0, 0.0],
        "green_0": [10.0, 3.0, 0.0],
        "red_1": [30.0, -3.0, 0.0],
        "green_1": [30.0, 3.0, 0.0],
    },
    "ticks": [
        {"wamv": [0.0, 0.0, 0.0]},
        {"wamv": [8.0, 0.5, 0.0]},
        {"wamv": [12.0, 0.5, 0.0]},
        {"wamv": [28.0, -1.0, 0.0]},
        {"wamv": [32.0, -1.0, 0.0]},
    ],
}

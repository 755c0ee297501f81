"""Constants and mappings for the Lock-In league engine."""

# Metric field names, in display order
METRIC_FIELDS = (
    'steps',
    'sleep_hours',
    'calories',
    'workouts',
    'stand_hours',
    'distance',
)

# Accepted aliases for externally-sourced metric payloads (camelCase clients)
METRIC_ALIASES = {
    'steps': 'steps',
    'sleepHours': 'sleep_hours',
    'sleep_hours': 'sleep_hours',
    'calories': 'calories',
    'workouts': 'workouts',
    'workoutMinutes': 'workouts',
    'workout_minutes': 'workouts',
    'standHours': 'stand_hours',
    'stand_hours': 'stand_hours',
    'distance': 'distance',
    'distanceMiles': 'distance',
    'distance_miles': 'distance',
}

# Metric field -> scoring weight key
METRIC_WEIGHT_KEYS = {
    'steps': 'steps',
    'sleep_hours': 'sleep',
    'calories': 'calories',
    'workouts': 'workouts',
    'stand_hours': 'stand',
    'distance': 'distance',
}

# Units each weight is applied per (steps are scored per 1,000, calories per 100)
METRIC_UNITS = {
    'steps': 1000,
    'sleep_hours': 1,
    'calories': 100,
    'workouts': 1,
    'stand_hours': 1,
    'distance': 1,
}

# Join codes skip easily-confused characters (0/O, 1/I)
JOIN_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
JOIN_CODE_LENGTH = 6

SEMIFINAL_ROUND = 1
FINAL_ROUND = 2

PLAYOFF_STATUS_TEXT = {
    0: 'Playoffs Not Started',
    1: 'Semifinals',
    2: 'Finals',
    3: 'Season Complete',
}

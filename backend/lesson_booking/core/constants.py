"""Application-wide constants for the lesson booking service."""

from __future__ import annotations

# Slot grid
SLOT_INTERVAL_MINUTES = 30
MINUTES_PER_DAY = 24 * 60
SLOTS_PER_DAY = MINUTES_PER_DAY // SLOT_INTERVAL_MINUTES  # 48

# Lesson durations offered to students
HALF_HOUR_LESSON = 30
FULL_HOUR_LESSON = 60

# Day of week mapping (0 = Sunday, matching stored availability rows)
DAYS_OF_WEEK = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

# Bookable-slot listing defaults
DEFAULT_LISTING_DAYS = 7

# Text constraints
MAX_REASON_LENGTH = 255
MAX_NAME_LENGTH = 255

"""
Errors raised by the scheduling engine.
"""


class SchedulingError(Exception):
    """Base class for scheduling engine errors."""


class InvalidRating(SchedulingError, ValueError):
    """Raised when a rating is not one of Again/Hard/Good/Easy."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid rating: {value!r} (expected 1-4 or again/hard/good/easy)")

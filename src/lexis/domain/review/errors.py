"""Errors raised by the scheduler when its inputs are malformed."""


class SchedulerError(Exception):
    """Base class for all scheduling errors."""


class InvalidGrade(SchedulerError, ValueError):
    """Quality score, rating or outcome outside its declared range."""


class InvalidState(SchedulerError, ValueError):
    """Review state that cannot be scheduled (e.g. negative or non-finite interval)."""

from __future__ import annotations


class SchedulerError(Exception):
    """Base class for every error raised by the simulation engine."""


class InvalidInput(SchedulerError, ValueError):
    """
    Malformed or duplicate process data.

    Raised before any simulation work starts; the message names the
    offending process.
    """


class InvalidConfiguration(SchedulerError, ValueError):
    """Unknown policy name or a bad Round Robin quantum."""

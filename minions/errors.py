"""
Error kinds raised by the minions engine.

Only conditions that must stop a load or restore are errors. Conditions
that arise inside the running simulation (an unmet fertilization
precondition, an out-of-range mutation request, an organism running out
of energy) resolve to no-ops, clamps or lifecycle transitions instead.
"""


class MinionsError(Exception):
    """Base class for all engine errors."""


class MalformedGenotype(MinionsError, ValueError):
    """Genotype data has the wrong bit length or is not binary."""

    def __init__(self, message: str, expected_length: int = None, actual_length: int = None):
        super().__init__(message)
        self.expected_length = expected_length
        self.actual_length = actual_length


class SnapshotError(MinionsError):
    """A world snapshot could not be restored."""

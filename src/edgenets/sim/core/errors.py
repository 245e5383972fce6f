from __future__ import annotations


class EdgeNetsError(Exception):
    """Base class for errors surfaced to callers of the evolution engine."""


class InvalidConfigurationError(EdgeNetsError, ValueError):
    pass


class SamplingExhaustedError(EdgeNetsError, RuntimeError):
    def __init__(self, lower: int, upper: int, attempts: int, reason: str = "") -> None:
        self.lower = lower
        self.upper = upper
        self.attempts = attempts
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"No value in [{lower}, {upper}] outside the exclusion ranges after {attempts} attempts{detail}"
        )

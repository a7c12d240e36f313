"""Data models for Action Commander."""

from __future__ import annotations

import enum


class PinMode(enum.Enum):
    CURRENT = "current"
    LATEST = "latest"
    COMPAT = "compat"

    @property
    def label(self) -> str:
        if self is PinMode.COMPAT:
            return "latest compatible"
        return self.value

    @classmethod
    def from_str(cls, s: str) -> PinMode:
        for member in cls:
            if member.value == s:
                return member
        raise ValueError(f"invalid pin mode: {s!r}")


class Severity(enum.IntEnum):
    """Diagnostic severities, ordered like the stdlib logging levels."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    def __str__(self) -> str:
        return self.name

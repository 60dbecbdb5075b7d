from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

_LEADING_DIGITS = re.compile(r"^\s*(\d+)")


def _parse_segment(segment: str) -> int:
    # Leading digits only: "1 (c)" -> 1, "6b1" -> 6.
    match = _LEADING_DIGITS.match(segment)
    return int(match.group(1)) if match else 0


def parse_version(version: str) -> tuple[int, ...]:
    """
    Split a dotted version into integer segments.
    Each segment keeps its leading digits; segments without any count as 0,
    so "16.x.2" -> (16, 0, 2) and "16.5.1 (c)" -> (16, 5, 1).
    """
    return tuple(_parse_segment(part) for part in str(version).strip().split("."))


def compare_versions(v1: str, v2: str) -> int:
    """
    Compare two dotted versions segment by segment; missing trailing segments are 0.
    Returns -1, 0 or 1.
    """
    parts1 = parse_version(v1)
    parts2 = parse_version(v2)
    width = max(len(parts1), len(parts2))
    parts1 += (0,) * (width - len(parts1))
    parts2 += (0,) * (width - len(parts2))
    for p1, p2 in zip(parts1, parts2):
        if p1 < p2:
            return -1
        if p1 > p2:
            return 1
    return 0


def is_version_in_range(version: str, low: str, high: str) -> bool:
    return compare_versions(version, low) >= 0 and compare_versions(version, high) <= 0


@dataclass(frozen=True)
class VersionRange:
    low: str = "0"
    high: Optional[str] = None
    high_inclusive: bool = True
    note: Optional[str] = None

    @classmethod
    def exact(cls, version: str, note: Optional[str] = None) -> "VersionRange":
        return cls(low=version, high=version, note=note)

    @classmethod
    def at_least(cls, version: str, note: Optional[str] = None) -> "VersionRange":
        return cls(low=version, note=note)

    @classmethod
    def below(cls, version: str, note: Optional[str] = None) -> "VersionRange":
        return cls(high=version, high_inclusive=False, note=note)

    def contains(self, version: str) -> bool:
        if compare_versions(version, self.low) < 0:
            return False
        if self.high is None:
            return True
        upper = compare_versions(version, self.high)
        return upper <= 0 if self.high_inclusive else upper < 0

    def describe(self) -> str:
        if self.high is None:
            return f"{self.low}+"
        if not self.high_inclusive:
            return f"< {self.high}"
        if compare_versions(self.low, self.high) == 0:
            return self.low
        return f"{self.low} - {self.high}"

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from . import utils
from .chips import CHIP_LINEAGE, chips_between, has_checkm8, is_chip_at_or_before
from .models import JailbreakTool, ToolType
from .versions import VersionRange

log = utils.get_logger(__name__)


class RuleTableError(ValueError):
    """Raised when a rule table declaration is inconsistent."""


def _check_chips(chips: Iterable[str]) -> None:
    unknown = sorted(chip for chip in chips if chip not in CHIP_LINEAGE)
    if unknown:
        raise RuleTableError("Unknown chip(s): " + ", ".join(unknown))


@dataclass(frozen=True)
class ChipMatch:
    """Chip predicate: an explicit set, everything up to a generation, or the checkm8 chips."""

    chips: frozenset[str] = frozenset()
    up_to: Optional[str] = None
    checkm8_only: bool = False

    @classmethod
    def only(cls, *chips: str) -> "ChipMatch":
        _check_chips(chips)
        return cls(chips=frozenset(chips))

    @classmethod
    def between(cls, first: str, last: str) -> "ChipMatch":
        _check_chips((first, last))
        try:
            return cls(chips=chips_between(first, last))
        except ValueError as exc:
            raise RuleTableError(str(exc)) from exc

    @classmethod
    def at_or_before(cls, target: str) -> "ChipMatch":
        _check_chips((target,))
        return cls(up_to=target)

    @classmethod
    def checkm8(cls) -> "ChipMatch":
        return cls(checkm8_only=True)

    def matches(self, chip: str) -> bool:
        if self.checkm8_only:
            return has_checkm8(chip)
        if self.up_to is not None:
            return is_chip_at_or_before(chip, self.up_to)
        return chip in self.chips

    def describe(self) -> str:
        if self.checkm8_only:
            return "checkm8 chips (A5-A11)"
        if self.up_to is not None:
            return f"{self.up_to} and earlier"
        return ", ".join(chip for chip in CHIP_LINEAGE if chip in self.chips)


@dataclass(frozen=True)
class Tier:
    """One chip group of a tool with the version windows valid for it."""

    chips: ChipMatch
    ranges: tuple[VersionRange, ...]
    notes: Optional[str] = None

    def match(self, chip: str, version: str) -> Optional[VersionRange]:
        if not self.chips.matches(chip):
            return None
        return next((window for window in self.ranges if window.contains(version)), None)


@dataclass(frozen=True)
class ToolRule:
    name: str
    type: ToolType
    tiers: tuple[Tier, ...]
    website: Optional[str] = None
    notes: Optional[str] = None
    # Name of the primary tool this rule stands in for; skipped when the primary applies.
    fallback_for: Optional[str] = None

    def evaluate(self, chip: str, version: str) -> Optional[JailbreakTool]:
        for tier in self.tiers:
            window = tier.match(chip, version)
            if window is None:
                continue
            return JailbreakTool(
                name=self.name,
                type=self.type,
                website=self.website,
                notes=window.note or tier.notes or self.notes,
            )
        return None


def dedupe_tools(tools: Iterable[JailbreakTool]) -> list[JailbreakTool]:
    """Drop repeated tool names, keeping the first occurrence and overall order."""
    seen: set[str] = set()
    unique: list[JailbreakTool] = []
    for tool in tools:
        if tool.name in seen:
            continue
        seen.add(tool.name)
        unique.append(tool)
    return unique


class RuleTable:
    """
    Ordered, validated set of tool rules.

    Declaration order is the display order of matched tools. Fallback rules
    must be declared after the primary they defer to.
    """

    def __init__(self, rules: Sequence[ToolRule]) -> None:
        self._rules: tuple[ToolRule, ...] = tuple(rules)
        self._validate()

    @property
    def rules(self) -> tuple[ToolRule, ...]:
        return self._rules

    def _validate(self) -> None:
        primaries: set[str] = set()
        for rule in self.rules:
            if not rule.tiers:
                raise RuleTableError(f"{rule.name}: at least one tier is required")
            if any(not tier.ranges for tier in rule.tiers):
                raise RuleTableError(f"{rule.name}: every tier needs a version range")
            if rule.fallback_for is None:
                primaries.add(rule.name)
            elif rule.fallback_for not in primaries:
                raise RuleTableError(
                    f"{rule.name}: fallback target {rule.fallback_for!r} must be a primary rule declared before it"
                )

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[ToolRule]:
        return iter(self.rules)

    def evaluate(self, chip: str, version: str) -> list[JailbreakTool]:
        """
        Collect every tool that applies to ``chip`` on ``version``.

        Primary rules are evaluated first; a fallback rule is only considered
        when its primary did not match. Output follows declaration order with
        duplicate names removed.
        """
        matched: dict[int, JailbreakTool] = {}
        for index, rule in enumerate(self.rules):
            if rule.fallback_for is None:
                tool = rule.evaluate(chip, version)
                if tool is not None:
                    matched[index] = tool

        accepted = {tool.name for tool in matched.values()}
        for index, rule in enumerate(self.rules):
            if rule.fallback_for is None:
                continue
            if rule.fallback_for in accepted:
                log.debug("Skipping %s: %s applies to %s on %s", rule.name, rule.fallback_for, chip, version)
                continue
            tool = rule.evaluate(chip, version)
            if tool is not None:
                matched[index] = tool

        return dedupe_tools(matched[index] for index in sorted(matched))

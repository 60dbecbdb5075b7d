from __future__ import annotations

from typing import get_args

from .models import Chip

# Generation order: legacy ARM parts, then A-series, then M-series.
CHIP_LINEAGE: tuple[str, ...] = get_args(Chip)

_UNKNOWN_GENERATION = 999

# checkm8 covers A5 through A11 (iPhone 4S through iPhone X); A4 and older use limera1n.
CHECKM8_CHIPS = frozenset(
    {
        "A5", "A5X",
        "A6", "A6X",
        "A7",
        "A8", "A8X",
        "A9", "A9X",
        "A10", "A10X",
        "A11",
    }
)


def chip_generation(chip: str) -> int:
    """Lineage index of a chip; unknown chips sort after everything."""
    try:
        return CHIP_LINEAGE.index(chip)
    except ValueError:
        return _UNKNOWN_GENERATION


def is_chip_at_or_before(chip: str, target: str) -> bool:
    return chip_generation(chip) <= chip_generation(target)


def has_checkm8(chip: str) -> bool:
    return chip in CHECKM8_CHIPS


def chips_between(first: str, last: str) -> frozenset[str]:
    """Inclusive slice of the lineage, e.g. chips_between("A12", "A14")."""
    start = CHIP_LINEAGE.index(first)
    end = CHIP_LINEAGE.index(last)
    if start > end:
        raise ValueError(f"{first} comes after {last} in the chip lineage")
    return frozenset(CHIP_LINEAGE[start : end + 1])

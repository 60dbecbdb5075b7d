"""
Jailbreak tool windows, in display order: current tools first, then the
bootrom-based tools, then the historical ones.

Windows follow ios.cfw.guide and The Apple Wiki. Tools without a chip
restriction of their own are bounded by the newest chip that shipped while
their iOS range was current.
"""
from __future__ import annotations

from functools import lru_cache

from .rules import ChipMatch, RuleTable, Tier, ToolRule
from .versions import VersionRange as R

_LEGACY_32BIT = ChipMatch.only("A5", "A5X", "A6", "A6X")

DEFAULT_RULES: tuple[ToolRule, ...] = (
    ToolRule(
        name="palera1n",
        type="semi-tethered",
        website="https://palera.in",
        tiers=(
            Tier(ChipMatch.at_or_before("A10X"), (R.at_least("15.0"),)),
            Tier(ChipMatch.only("A11"), (R.at_least("15.0"),), notes="A11 devices must disable passcode"),
        ),
    ),
    # A15/A16/M2 lose 16.5.1-16.6.1 because the PPL bypass does not work there.
    ToolRule(
        name="Dopamine",
        type="semi-untethered",
        website="https://ellekit.space/dopamine",
        tiers=(
            Tier(ChipMatch.between("A8", "A14"), (R("15.0", "16.6.1"),)),
            Tier(ChipMatch.only("A15", "A16", "M2"), (R("15.0", "16.5"),)),
            Tier(ChipMatch.only("M1"), (R("15.0", "16.5.1"),)),
        ),
    ),
    ToolRule(
        name="Serotonin",
        type="semi-untethered",
        website="https://github.com/mineek/Serotonin",
        notes="Semi-jailbreak with tweak injection",
        fallback_for="Dopamine",
        tiers=(Tier(ChipMatch.between("A12", "A16"), (R("16.0", "16.6.1"),)),),
    ),
    # 17.0.1 patched the exploit.
    ToolRule(
        name="NathanLR",
        type="semi-untethered",
        website="https://github.com/NathanLR/NathanLR",
        tiers=(
            Tier(
                ChipMatch.between("A12", "A17"),
                (R("16.5.1", "16.6.1"), R.exact("17.0", note="iOS 17.0 only - 17.0.1+ not supported")),
            ),
        ),
    ),
    ToolRule(
        name="meowbrek2",
        type="semi-untethered",
        website="https://kok3shidoll.github.io/meowbrek2/",
        tiers=(Tier(ChipMatch.at_or_before("A11"), (R("15.0", "15.8.3"),)),),
    ),
    ToolRule(
        name="unc0ver",
        type="semi-untethered",
        website="https://unc0ver.dev",
        tiers=(
            Tier(ChipMatch.at_or_before("A14"), (R("11.0", "14.3"),)),
            Tier(ChipMatch.between("A12", "A13"), (R("14.6", "14.8"),), notes="A12/A13 only for iOS 14.6-14.8"),
        ),
    ),
    ToolRule(
        name="Taurine",
        type="semi-untethered",
        website="https://taurine.app",
        tiers=(Tier(ChipMatch.at_or_before("A14"), (R("14.0", "14.8.1"),)),),
    ),
    ToolRule(
        name="checkra1n",
        type="semi-tethered",
        website="https://checkra.in",
        notes="Bootrom exploit - permanent",
        tiers=(Tier(ChipMatch.checkm8(), (R("12.0", "14.8.1"),)),),
    ),
    ToolRule(
        name="Chimera",
        type="semi-untethered",
        website="https://chimera.coolstar.org",
        tiers=(Tier(ChipMatch.at_or_before("A12"), (R("12.0", "12.5.7"),)),),
    ),
    ToolRule(
        name="Electra",
        type="semi-untethered",
        tiers=(Tier(ChipMatch.at_or_before("A11"), (R("11.0", "11.4.1"),)),),
    ),
    ToolRule(
        name="Phoenix",
        type="semi-untethered",
        notes="32-bit devices only",
        tiers=(Tier(_LEGACY_32BIT, (R("9.3.5", "9.3.6"),)),),
    ),
    ToolRule(
        name="Home Depot",
        type="semi-untethered",
        notes="32-bit devices only",
        tiers=(Tier(_LEGACY_32BIT, (R("9.1", "9.3.4"),)),),
    ),
    ToolRule(name="Pangu9", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A9X"), (R("9.0", "9.1"),)),)),
    ToolRule(name="TaiG", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A8X"), (R("8.0", "8.4"),)),)),
    ToolRule(name="Pangu8", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A8X"), (R("8.0", "8.1.2"),)),)),
    ToolRule(name="evasi0n7", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A7"), (R("7.0", "7.0.6"),)),)),
    ToolRule(name="p0sixspwn", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A6X"), (R("6.1.3", "6.1.6"),)),)),
    ToolRule(name="evasi0n", type="untethered", tiers=(Tier(ChipMatch.at_or_before("A6X"), (R("6.0", "6.1.2"),)),)),
    ToolRule(
        name="redsn0w/Absinthe",
        type="untethered",
        tiers=(Tier(ChipMatch.at_or_before("A5X"), (R("5.0", "5.1.1"),)),),
    ),
    ToolRule(
        name="redsn0w",
        type="tethered",
        notes="May require tethered boot",
        tiers=(Tier(ChipMatch.checkm8(), (R.below("5.0"),)),),
    ),
)


@lru_cache(maxsize=1)
def default_rules() -> RuleTable:
    return RuleTable(DEFAULT_RULES)

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from . import utils
from .catalog import DeviceCatalog, default_catalog
from .chips import has_checkm8
from .jailbreaks import default_rules
from .models import CompatibilityVerdict, DeviceRecord
from .rules import RuleTable

log = utils.get_logger(__name__)

_CHECKM8_NOTE = "This device has a permanent bootrom exploit (checkm8)"
_BOOTROM_NOTE = "This device has a permanent bootrom exploit"


def _unknown(query: str) -> CompatibilityVerdict:
    return CompatibilityVerdict(
        can_jailbreak=False,
        status="UNKNOWN",
        matched_tools=[],
        has_bootrom_exploit=False,
        notes=f"Device not found in database: {query}",
    )


class CompatibilityResolver:
    """
    Answers "which jailbreak tools work on this device and iOS version".

    Pure and stateless apart from the catalog and rule table it is built with,
    so one instance can be shared freely.
    """

    def __init__(self, catalog: Optional[DeviceCatalog] = None, rules: Optional[RuleTable] = None) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.rules = rules if rules is not None else default_rules()

    def resolve(self, device_model: str, ios_version: str) -> CompatibilityVerdict:
        device = self.catalog.find(device_model)
        if device is None:
            log.debug("Unknown device %r", device_model)
            return _unknown(device_model)
        return self.verdict_for(device, ios_version)

    def resolve_identifier(self, product_type: str, ios_version: str) -> CompatibilityVerdict:
        device = self.catalog.find_by_identifier(product_type)
        if device is None:
            log.debug("Unknown product type %r", product_type)
            return _unknown(product_type)
        return self.verdict_for(device, ios_version)

    def verdict_for(self, device: DeviceRecord, ios_version: str) -> CompatibilityVerdict:
        tools = self.rules.evaluate(device.chip, ios_version)
        can_jailbreak = bool(tools)

        notes = None
        if device.has_bootrom_exploit:
            notes = _CHECKM8_NOTE if has_checkm8(device.chip) else _BOOTROM_NOTE

        log.debug(
            "%s (%s) on iOS %s: %s",
            device.name,
            device.chip,
            ios_version,
            ", ".join(tool.name for tool in tools) or "no tools",
        )
        return CompatibilityVerdict(
            can_jailbreak=can_jailbreak,
            status="JAILBREAKABLE" if can_jailbreak else "NOT_JAILBROKEN",
            matched_tools=tools,
            has_bootrom_exploit=device.has_bootrom_exploit,
            notes=notes,
            device=device,
        )

    def chip_for(self, device_model: str) -> Optional[str]:
        return self.catalog.chip_for(device_model)

    def has_bootrom_exploit(self, device_model: str) -> bool:
        return self.catalog.has_bootrom_exploit(device_model)

    def storage_options(self, device_model: str) -> tuple[int, ...]:
        return self.catalog.storage_options(device_model)

    def supported_devices(self) -> list[str]:
        return self.catalog.names()


@lru_cache(maxsize=1)
def default_resolver() -> CompatibilityResolver:
    return CompatibilityResolver()


def check_compatibility(device_model: str, ios_version: str) -> CompatibilityVerdict:
    """Resolve against the built-in catalog and rule table."""
    return default_resolver().resolve(device_model, ios_version)

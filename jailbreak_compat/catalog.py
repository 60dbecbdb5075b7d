from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import TypeAdapter, ValidationError

from . import utils
from .apple_devices import ALL_DEVICES
from .models import DeviceRecord

log = utils.get_logger(__name__)

_APPLE_PREFIX = re.compile(r"^apple\s+", re.IGNORECASE)
# Matches "(3rd Gen)" as well as bare "6gen"; the replacement keeps any parentheses.
_GENERATION = re.compile(r"\b(\d+)(?:st|nd|rd|th)?\s*gen(?:eration)?\b", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
_MODEL_LINE = re.compile(r"(?:iPhone|iPad)\s+(\d+)", re.IGNORECASE)
_BOUNDARY_CHARS = (" ", "(")

_RECORDS = TypeAdapter(list[DeviceRecord])


class CatalogError(Exception):
    """Base error for catalog loading and strict lookups."""

    def __init__(self, message: str, *, exit_code: int = 1, payload: Optional[dict] = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.payload = payload or {}


class UnknownDeviceError(CatalogError):
    """Raised by strict lookups when a model does not resolve."""

    def __init__(self, model: str) -> None:
        super().__init__(f"Device not found in database: {model}", exit_code=3, payload={"model": model})
        self.model = model


def _canonical_generation(text: str) -> str:
    return _GENERATION.sub(r"\1 generation", text)


def normalize_model_input(model: str) -> str:
    """
    Prepare free-form input for lookup: "Apple iPhone SE (3rd Gen)" -> "iPhone SE (3 generation)".
    Case is preserved.
    """
    normalized = _APPLE_PREFIX.sub("", model.strip())
    return _canonical_generation(normalized)


def normalize_device_name(name: str) -> str:
    """Case- and whitespace-insensitive comparison key for device names."""
    normalized = _WHITESPACE.sub(" ", name.strip().lower())
    normalized = _APPLE_PREFIX.sub("", normalized)
    return _canonical_generation(normalized).strip()


def _variant_priority(name: str) -> int:
    lower = name.lower()
    if "pro max" in lower or "ultra" in lower:
        return 0
    if "pro" in lower:
        return 1
    if "plus" in lower:
        return 2
    if "mini" in lower:
        return 4
    if "se" in lower.split():
        return 5
    return 3


def _model_line_number(name: str) -> int:
    match = _MODEL_LINE.search(name)
    return int(match.group(1)) if match else 0


class DeviceCatalog:
    """Immutable, ordered collection of device records with name-based lookup."""

    def __init__(self, devices: Iterable[DeviceRecord]) -> None:
        self._devices: tuple[DeviceRecord, ...] = tuple(devices)
        self._input_forms = tuple(normalize_model_input(device.name) for device in self._devices)
        self._keys = tuple(normalize_device_name(device.name) for device in self._devices)

    @classmethod
    def from_json(cls, path: Path | str) -> "DeviceCatalog":
        """
        Load a catalog from a JSON array of device records.
        Raises CatalogError (exit code 2) if the file is unreadable or invalid.
        """
        file_path = Path(path)
        try:
            raw = file_path.read_bytes()
        except OSError as exc:
            raise CatalogError(
                f"Catalog file not readable: {file_path}", exit_code=2, payload={"path": str(file_path)}
            ) from exc

        try:
            records = _RECORDS.validate_json(raw)
        except ValidationError as exc:
            errors = [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()]
            raise CatalogError(
                f"Invalid catalog file: {file_path}",
                exit_code=2,
                payload={"path": str(file_path), "errors": errors},
            ) from exc

        log.debug("Loaded %d device records from %s", len(records), file_path)
        return cls(records)

    @property
    def devices(self) -> tuple[DeviceRecord, ...]:
        return self._devices

    def __len__(self) -> int:
        return len(self._devices)

    def __iter__(self) -> Iterator[DeviceRecord]:
        return iter(self._devices)

    def find(self, model: str) -> Optional[DeviceRecord]:
        """
        Resolve a free-form model string to a record.

        Tries, in order: exact match on the normalized name, case-insensitive
        match, then a prefix match where the catalog name continues with a
        space or "(" (so "iPhone 4" never matches "iPhone 4s").
        Returns None when nothing matches.
        """
        normalized = normalize_model_input(model)
        if not normalized:
            return None

        for device, form in zip(self._devices, self._input_forms):
            if form == normalized:
                return device

        key = normalize_device_name(normalized)
        for device, device_key in zip(self._devices, self._keys):
            if device_key == key:
                return device

        for device, device_key in zip(self._devices, self._keys):
            if not device_key.startswith(key):
                continue
            next_char = device_key[len(key) : len(key) + 1]
            if next_char == "" or next_char in _BOUNDARY_CHARS:
                return device

        log.debug("No catalog match for %r", model)
        return None

    def require(self, model: str) -> DeviceRecord:
        device = self.find(model)
        if device is None:
            raise UnknownDeviceError(model)
        return device

    def find_by_identifier(self, identifier: str) -> Optional[DeviceRecord]:
        wanted = identifier.strip()
        return next((device for device in self._devices if wanted in device.identifiers), None)

    def find_by_model_number(self, model_number: str) -> Optional[DeviceRecord]:
        wanted = model_number.strip().upper()
        return next(
            (device for device in self._devices if any(m.upper() == wanted for m in device.model_numbers)),
            None,
        )

    def chip_for(self, model: str) -> Optional[str]:
        device = self.find(model)
        return device.chip if device else None

    def has_bootrom_exploit(self, model: str) -> bool:
        device = self.find(model)
        return device.has_bootrom_exploit if device else False

    def storage_options(self, model: str) -> tuple[int, ...]:
        device = self.find(model)
        return device.storage_options if device else ()

    def names(self) -> list[str]:
        return [device.name for device in self._devices]

    def search(self, query: str) -> list[DeviceRecord]:
        lowered = query.strip().lower()
        return [
            device
            for device in self._devices
            if lowered in device.name.lower() or lowered in f"apple {device.name}".lower()
        ]

    def sorted_for_listing(self, family: Optional[str] = None) -> list[DeviceRecord]:
        """Newest first, then model line (iPhone 16 before 15), then Pro Max > Pro > Plus > base > mini > SE."""
        devices = [d for d in self._devices if family is None or d.family.lower() == family.lower()]
        return sorted(
            devices,
            key=lambda d: (-d.release_year, -_model_line_number(d.name), _variant_priority(d.name)),
        )


@lru_cache(maxsize=1)
def default_catalog() -> DeviceCatalog:
    return DeviceCatalog(ALL_DEVICES)

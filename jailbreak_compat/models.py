from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Chip = Literal[
    "APL0098",
    "APL0278",
    "APL0298",
    "A4",
    "A5",
    "A5X",
    "A6",
    "A6X",
    "A7",
    "A8",
    "A8X",
    "A9",
    "A9X",
    "A10",
    "A10X",
    "A11",
    "A12",
    "A12X",
    "A12Z",
    "A13",
    "A14",
    "A15",
    "A16",
    "A17",
    "A18",
    "A19",
    "M1",
    "M2",
    "M3",
    "M4",
]
Family = Literal["iPhone", "iPod touch", "iPad"]
ToolType = Literal["untethered", "semi-untethered", "semi-tethered", "tethered"]
JailbreakStatus = Literal["JAILBROKEN", "JAILBREAKABLE", "NOT_JAILBROKEN", "UNKNOWN"]

# Listing filters collapse the stored statuses into two buckets.
STATUS_LABELS = {
    "JAILBROKEN": "Jailbreakable",
    "JAILBREAKABLE": "Jailbreakable",
    "ROOTLESS_JB": "Jailbreakable",
    "ROOTFUL_JB": "Jailbreakable",
    "NOT_JAILBROKEN": "Stock",
    "STOCK": "Stock",
    "UNKNOWN": "Unknown",
}


def status_label(value: str) -> str:
    return STATUS_LABELS.get(value) or value.replace("_", " ")


class DeviceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name (e.g. iPhone 14 Pro)")
    family: Family = Field(..., description="Product line (iPhone|iPod touch|iPad)")
    identifiers: tuple[str, ...] = Field(default=(), description="Apple internal product identifiers (e.g. iPhone15,2)")
    model_numbers: tuple[str, ...] = Field(default=(), description="Regulatory model numbers (e.g. A2650)")
    chip: Chip = Field(..., description="System on chip")
    release_year: int
    storage_options: tuple[int, ...] = Field(default=(), description="Capacities in GB")
    has_bootrom_exploit: bool = Field(False, description="Chip has an unpatchable bootrom exploit")
    notes: Optional[str] = None


class JailbreakTool(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: ToolType
    website: Optional[str] = None
    notes: Optional[str] = None


class CompatibilityVerdict(BaseModel):
    can_jailbreak: bool
    status: JailbreakStatus
    matched_tools: list[JailbreakTool] = Field(default_factory=list)
    has_bootrom_exploit: bool = False
    notes: Optional[str] = None
    device: Optional[DeviceRecord] = None

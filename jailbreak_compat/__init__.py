from __future__ import annotations

from .catalog import DeviceCatalog, default_catalog
from .models import CompatibilityVerdict, DeviceRecord, JailbreakTool
from .resolver import CompatibilityResolver, check_compatibility, default_resolver
from .rules import RuleTable

__version__ = "0.1.0"

__all__ = [
    "CompatibilityResolver",
    "CompatibilityVerdict",
    "DeviceCatalog",
    "DeviceRecord",
    "JailbreakTool",
    "RuleTable",
    "__version__",
    "check_compatibility",
    "default_catalog",
    "default_resolver",
]

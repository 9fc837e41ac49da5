"""Public package exports for sample-shrinker with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "ConversionPlan",
    "SampleProperties",
    "TargetConfig",
    "RunMode",
    "plan_conversion",
    "inspect_sample",
    "is_effectively_mono",
    "format_summary",
    "ShrinkSample",
    "RunContext",
    "InspectionError",
    "UnsupportedEncodingError",
    "ConversionFailure",
    "ConfigError",
    "FilesystemError",
]

_EXPORT_MODULES: dict[str, str] = {
    "ConversionPlan": "sample_shrinker.domain.models",
    "SampleProperties": "sample_shrinker.domain.models",
    "TargetConfig": "sample_shrinker.utils.config",
    "RunMode": "sample_shrinker.utils.config",
    "plan_conversion": "sample_shrinker.decision",
    "inspect_sample": "sample_shrinker.inspection",
    "is_effectively_mono": "sample_shrinker.auto_mono",
    "format_summary": "sample_shrinker.formatting",
    "ShrinkSample": "sample_shrinker.application.shrink_service",
    "RunContext": "sample_shrinker.application.context",
    "InspectionError": "sample_shrinker.domain.errors",
    "UnsupportedEncodingError": "sample_shrinker.domain.errors",
    "ConversionFailure": "sample_shrinker.domain.errors",
    "ConfigError": "sample_shrinker.domain.errors",
    "FilesystemError": "sample_shrinker.domain.errors",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'sample_shrinker' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value

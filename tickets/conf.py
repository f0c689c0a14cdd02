"""Protocol settings, read from the ``SPOTLIGHT`` dict in Django settings."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "ROTATION_SECONDS": 30,
    "WINDOW_TOLERANCE": 1,
    "CACHE_TIMEOUT": 60,
}


def spotlight_setting(name: str) -> Any:
    overrides = getattr(settings, "SPOTLIGHT", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]

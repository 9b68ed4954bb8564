"""Render settings schema and resolver."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from .config import DEFAULT_PPI


@dataclass(frozen=True)
class RenderSettings:
    """Values that shape rendering but do not belong to a template."""

    ppi: float = DEFAULT_PPI
    # Page size used when the template has no base image. Zero means unset.
    default_width: int = 0
    default_height: int = 0
    font_directories: tuple[str, ...] = ()
    base_directory: str = "."

    def resolve_path(self, raw_path: str) -> Path:
        """Resolve a template file reference against `base_directory`."""
        path = Path(raw_path)
        if path.is_absolute():
            return path
        return Path(self.base_directory) / path


_BUILTIN_SETTINGS_PROFILES: dict[str, RenderSettings] = {
    "default": RenderSettings(),
    "a4": RenderSettings(default_width=595, default_height=842),
    "letter": RenderSettings(default_width=612, default_height=792),
}


def available_settings_profiles() -> tuple[str, ...]:
    """Return built-in settings profile names."""
    return tuple(sorted(_BUILTIN_SETTINGS_PROFILES))


def resolve_settings(
    *,
    profile: str = "default",
    settings_file: str | Path | None = None,
) -> RenderSettings:
    """Resolve one built-in profile plus optional file overrides."""
    if profile not in _BUILTIN_SETTINGS_PROFILES:
        valid = ", ".join(available_settings_profiles())
        msg = f"unknown settings profile '{profile}'. Valid profiles: {valid}."
        raise ValueError(msg)

    resolved = _BUILTIN_SETTINGS_PROFILES[profile]
    if settings_file is not None:
        resolved = replace(resolved, **_load_settings_file(Path(settings_file)))
    return resolved


def _load_settings_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        msg = f"settings file '{path}' does not exist."
        raise ValueError(msg)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"settings file '{path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc

    if not isinstance(payload, dict):
        msg = "settings file content must be a JSON object."
        raise ValueError(msg)

    allowed = set(RenderSettings.__dataclass_fields__)
    unknown = sorted(key for key in payload if key not in allowed)
    if unknown:
        msg = f"unknown settings key(s): {', '.join(unknown)}."
        raise ValueError(msg)

    values: dict[str, Any] = {}
    for key, raw_value in payload.items():
        if key == "ppi":
            values[key] = _parse_positive_number(raw_value, key=key)
        elif key in {"default_width", "default_height"}:
            values[key] = _parse_size(raw_value, key=key)
        elif key == "font_directories":
            values[key] = _parse_directories(raw_value, key=key)
        else:
            values[key] = _parse_directory(raw_value, key=key)
    return values


def _parse_positive_number(raw_value: Any, *, key: str) -> float:
    if isinstance(raw_value, bool) or not isinstance(raw_value, (int, float)) or raw_value <= 0:
        msg = f"settings key '{key}' must be a positive number."
        raise ValueError(msg)
    return float(raw_value)


def _parse_size(raw_value: Any, *, key: str) -> int:
    if isinstance(raw_value, bool) or not isinstance(raw_value, int) or raw_value < 0:
        msg = f"settings key '{key}' must be a non-negative integer."
        raise ValueError(msg)
    return raw_value


def _parse_directory(raw_value: Any, *, key: str) -> str:
    if not isinstance(raw_value, str) or not raw_value.strip():
        msg = f"settings key '{key}' must be a non-empty path string."
        raise ValueError(msg)
    return raw_value


def _parse_directories(raw_value: Any, *, key: str) -> tuple[str, ...]:
    if not isinstance(raw_value, list):
        msg = f"settings key '{key}' must be a list of path strings."
        raise ValueError(msg)
    return tuple(_parse_directory(item, key=key) for item in raw_value)

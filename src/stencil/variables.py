"""Caller-supplied variable values from the command line and JSON files."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any


def decode_value(raw_value: str) -> Any:
    """Decode a JSON literal, keeping anything else as plain text.

    `18` becomes an int and `["%Y", "2024"]` a list, while `Alice` stays
    a string.
    """
    try:
        return json.loads(raw_value)
    except json.JSONDecodeError:
        return raw_value


def parse_var_pairs(pairs: Sequence[str] | None) -> dict[str, Any]:
    """Parse repeatable key=value CLI pairs into a dict."""
    parsed: dict[str, Any] = {}
    for raw_pair in pairs or ():
        if "=" not in raw_pair:
            msg = f"invalid --var '{raw_pair}'. Expected key=value."
            raise ValueError(msg)
        raw_key, raw_value = raw_pair.split("=", 1)
        key = raw_key.strip()
        if not key:
            msg = f"invalid --var '{raw_pair}'. Key cannot be empty."
            raise ValueError(msg)
        parsed[key] = decode_value(raw_value.strip())
    return parsed


def load_vars_file(path: str | Path) -> dict[str, Any]:
    """Load variable values from a JSON object file."""
    path = Path(path)
    if not path.exists():
        msg = f"variables file '{path}' does not exist."
        raise ValueError(msg)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        msg = f"variables file '{path}' is not valid JSON: {exc}."
        raise ValueError(msg) from exc

    if not isinstance(payload, dict):
        msg = "variables file content must be a JSON object."
        raise ValueError(msg)
    return payload

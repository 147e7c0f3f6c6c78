from __future__ import annotations

from typing import Any

from flask import request

from ..core.constants import TRUTHY_FLAGS


def payload() -> dict[str, Any]:
    """JSON body, falling back to form fields for classic form posts."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def text(data: dict[str, Any], key: str, default: str = "") -> str:
    v = data.get(key)
    if v is None:
        return default
    return str(v)


def flag(data: dict[str, Any], key: str) -> bool:
    """Checkbox/JSON boolean: True, or one of "1", "true", "on", "yes"."""
    v = data.get(key)
    if isinstance(v, bool):
        return v
    return str(v or "").strip().lower() in TRUTHY_FLAGS

# resume_intake/services/resumes/address.py
"""Address Decomposer: settles street/line 2/city/state/zip from the model's answer."""
from __future__ import annotations

from typing import Any, Dict, Mapping

ADDRESS_PARTS = ("address", "address_2", "city", "state", "zip")


def _s(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def decompose(model_output: Mapping[str, Any]) -> Dict[str, str]:
    """
    Trust structured parts as returned. When none of address/city/state/zip is
    populated but a location string is, the whole location becomes ``address``.
    Splitting a free-form location is left to the model (see the prompt rules).
    """
    parts = {key: _s(model_output.get(key)) for key in ADDRESS_PARTS}
    location = _s(model_output.get("location"))
    if location and not any(parts[k] for k in ("address", "city", "state", "zip")):
        parts["address"] = location
    return parts

# resume_intake/services/resumes/option_matcher.py
"""
Semantic Option Matcher - reconciles a free-text model answer with a closed vocabulary.
Matching is normalized exact equality first, then bidirectional containment;
the first option in declared order wins. The result is always one of the
configured option strings verbatim, or "".
"""
from __future__ import annotations

import re
from typing import Any, Optional, Sequence

_SEPARATORS_RE = re.compile(r"[-_/]")
_WS_RE = re.compile(r"\s+")


def normalize_option(value: Optional[str]) -> str:
    """Lowercase, treat -, _ and / as spaces, collapse whitespace, trim. Idempotent."""
    if not isinstance(value, str):
        return ""
    s = _SEPARATORS_RE.sub(" ", value.lower())
    return _WS_RE.sub(" ", s).strip()


def resolve(raw_value: Any, allowed_options: Sequence[str]) -> str:
    """
    Map ``raw_value`` onto one of ``allowed_options``.

    1) normalized exact match
    2) normalized containment in either direction ("freelancer" -> "Freelance")
    3) otherwise ""
    """
    if raw_value is None:
        return ""
    needle = normalize_option(str(raw_value))
    if not needle:
        return ""

    normalized = [(opt, normalize_option(opt)) for opt in allowed_options]
    normalized = [(opt, norm) for opt, norm in normalized if norm]

    for opt, norm in normalized:
        if norm == needle:
            return opt

    for opt, norm in normalized:
        if needle in norm or norm in needle:
            return opt

    return ""

# resume_intake/services/resumes/extraction/llm_extraction.py
"""
Model-Assisted Resume Parser - one completion call per attempt, strict JSON
validation of the answer, and a single retry when the answer is unusable.
"""
# -----------------------------------------------------------------------------
# PURPOSE
# - Send the built system instructions plus the resume text at temperature 0.
#   No JSON-mode flag is sent: the target models may not support it, so the
#   prompt alone carries the output contract.
# - Validate: strip one optional ``` fence, json.loads, require an object.
# - At most two attempts (first + one retry). Two failures raise
#   InvalidModelOutput; there is no fallback to the heuristic parser here.
# - Coerce every field defensively: missing -> "" / [], non-object list items
#   dropped, custom_fields projected onto the request's visible fields with
#   closed-vocabulary answers resolved by the option matcher.
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from resume_intake.core.errors import InvalidModelOutput
from resume_intake.schemas.custom_field import FieldSchema
from resume_intake.schemas.resume import (
    EDUCATION_FIELDS,
    SCALAR_FIELDS,
    WORK_EXPERIENCE_FIELDS,
    EducationItem,
    ParsedResume,
    WorkExperienceItem,
)
from resume_intake.services.common.llm_client import get_llm_client
from resume_intake.services.resumes.address import decompose
from resume_intake.services.resumes.option_matcher import resolve
from resume_intake.services.resumes.prompt_builder import build_system_prompt, build_user_prompt

logger = logging.getLogger("resumes.llm_extraction")

MAX_ATTEMPTS = 2

_FENCE_RE = re.compile(r"^```(?:json)?[ \t]*\n?(.*?)```\s*$", re.IGNORECASE | re.MULTILINE | re.DOTALL)


class CompletionClient(Protocol):
    def chat_text(self, messages: List[Dict[str, str]], timeout: Optional[int] = None, *, temperature: float = 0) -> str:
        ...


# ----------------------------- Coercion helpers -------------------------------

def to_str(value: Any) -> str:
    """Trimmed string; None and objects become ""; lists are joined with ", "."""
    if value is None or isinstance(value, Mapping):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ", ".join(s for s in (to_str(v) for v in value) if s)
    return str(value).strip()


def to_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [s for s in (to_str(v) for v in value) if s]
    if isinstance(value, str):
        return [value.strip()] if value.strip() else []
    return []


def _object_list(value: Any, keys: Sequence[str]) -> List[Dict[str, str]]:
    if not isinstance(value, list):
        return []
    return [{k: to_str(item.get(k)) for k in keys} for item in value if isinstance(item, Mapping)]


def project_custom_fields(raw: Any, schema: FieldSchema) -> Dict[str, str]:
    """
    Keep only entries for visible fields (matched by field_name or label), keyed by label.
    Closed-vocabulary answers are resolved to a configured option; empty results are omitted.
    """
    if not isinstance(raw, Mapping) or schema.is_empty:
        return {}
    lookup = schema.lookup()
    out: Dict[str, str] = {}
    for key, value in raw.items():
        if value is None or not isinstance(key, str):
            continue
        field_def = lookup.get(key) or lookup.get(key.strip())
        if field_def is None:
            continue
        resolved = to_str(value)
        closed = schema.classification_for(field_def.field_name)
        if closed is not None:
            resolved = resolve(resolved, closed.options)
        if resolved and field_def.label not in out:
            out[field_def.label] = resolved
    return out


# ------------------------------- Validation -----------------------------------

def strip_code_fence(raw: str) -> str:
    """Remove a single optional ```/```json wrapper (commentary outside it is dropped)."""
    text = (raw or "").strip()
    m = _FENCE_RE.search(text)
    if m:
        return m.group(1).strip()
    return text


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def parse_model_json(raw: str) -> Optional[Dict[str, Any]]:
    """Strict parse of the model answer; None unless it is a JSON object. NaN/Infinity are rejected."""
    text = strip_code_fence(raw)
    try:
        obj = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError):
        return None
    return obj if isinstance(obj, dict) else None


def coerce_resume(obj: Mapping[str, Any], schema: FieldSchema) -> ParsedResume:
    scalars = {key: to_str(obj.get(key)) for key in SCALAR_FIELDS}
    scalars.update(decompose(obj))
    custom = project_custom_fields(obj.get("custom_fields"), schema)
    return ParsedResume(
        **scalars,
        skills=to_str_list(obj.get("skills")),
        education=[EducationItem(**e) for e in _object_list(obj.get("education"), EDUCATION_FIELDS)],
        work_experience=[
            WorkExperienceItem(**w) for w in _object_list(obj.get("work_experience"), WORK_EXPERIENCE_FIELDS)
        ],
        custom_fields=custom or None,
    )


def validate_model_output(raw: str, schema: FieldSchema) -> Optional[ParsedResume]:
    """Parse and coerce one model answer; None when it must be retried."""
    obj = parse_model_json(raw)
    if obj is None:
        return None
    return coerce_resume(obj, schema)


# --------------------------------- Parser -------------------------------------

def parse_with_model(
    text: str,
    schema: FieldSchema,
    client: Optional[CompletionClient] = None,
    *,
    system_prompt: Optional[str] = None,
) -> ParsedResume:
    """
    Extract a ParsedResume with the completion service.

    Raises InvalidModelOutput when both attempts return unusable output, and lets
    ModelUnavailable from the client propagate untouched (no retry on transport errors).
    """
    client = client or get_llm_client()
    messages = [
        {"role": "system", "content": system_prompt or build_system_prompt(schema)},
        {"role": "user", "content": build_user_prompt(text)},
    ]

    for attempt in range(1, MAX_ATTEMPTS + 1):
        raw = client.chat_text(messages, temperature=0)
        parsed = validate_model_output(raw, schema)
        if parsed is not None:
            logger.info("Model output accepted on attempt %d/%d", attempt, MAX_ATTEMPTS)
            return parsed
        logger.warning(
            "Model output rejected on attempt %d/%d (%d chars, not a JSON object)",
            attempt, MAX_ATTEMPTS, len(raw or ""),
        )

    logger.error("Model output invalid after %d attempts", MAX_ATTEMPTS)
    raise InvalidModelOutput()

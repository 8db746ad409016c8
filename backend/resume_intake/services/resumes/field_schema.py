# resume_intake/services/resumes/field_schema.py
"""
Field Schema Loader - fetches tenant custom field definitions for an entity type
and shapes them into a per-request FieldSchema.

Any failure of the field service degrades to "no custom fields": extraction
proceeds without them and the failure is only logged.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests
from pydantic import ValidationError

from resume_intake.core.config import settings
from resume_intake.core.errors import SchemaFetchFailed
from resume_intake.schemas.custom_field import (
    CLOSED_VOCABULARY_TYPES,
    CustomFieldDefinition,
    FieldClassification,
    FieldSchema,
)

logger = logging.getLogger("resumes.fields")


def _clean_strings(items: Iterable[Any]) -> List[str]:
    """Keep strings only, trimmed, non-empty, first occurrence wins."""
    seen = set()
    out: List[str] = []
    for it in items:
        if not isinstance(it, str):
            continue
        s = it.strip()
        if s and s not in seen:
            seen.add(s)
            out.append(s)
    return out


def normalize_options(raw: Any) -> List[str]:
    """
    Normalize the heterogeneous ``options`` payload into an ordered list.

    Accepted shapes:
    - list/tuple of strings (non-strings are skipped)
    - JSON-encoded list in a string
    - newline-delimited string (any string that is not a JSON list)
    - mapping: its values, in insertion order
    - None / anything else: []
    """
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return _clean_strings(raw)
    if isinstance(raw, Mapping):
        return _clean_strings(raw.values())
    if isinstance(raw, str):
        trimmed = raw.strip()
        if not trimmed:
            return []
        try:
            parsed = json.loads(trimmed)
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return _clean_strings(parsed)
        return _clean_strings(trimmed.splitlines())
    return []


def classify(field_def: CustomFieldDefinition) -> Optional[FieldClassification]:
    """Closed vocabulary when the type is select/radio and at least one option survives."""
    field_type = (field_def.field_type or "").strip().lower()
    if field_type not in CLOSED_VOCABULARY_TYPES:
        return None
    options = normalize_options(field_def.options)
    if not options:
        return None
    return FieldClassification(
        name=field_def.field_name,
        label=field_def.label,
        type=field_type,
        options=tuple(options),
    )


def build_field_schema(definitions: Iterable[CustomFieldDefinition]) -> FieldSchema:
    """Drop hidden/nameless fields, keep the first definition per field_name, classify the rest."""
    visible: List[CustomFieldDefinition] = []
    seen = set()
    for d in definitions:
        if d.is_hidden or not d.field_name.strip() or d.field_name in seen:
            continue
        seen.add(d.field_name)
        visible.append(d)

    closed: Dict[str, FieldClassification] = {}
    for d in visible:
        c = classify(d)
        if c is not None:
            closed[d.field_name] = c
    return FieldSchema(fields=tuple(visible), closed=closed)


def parse_field_definitions(payload: Any) -> List[CustomFieldDefinition]:
    """Read definitions from ``customFields`` (or ``data``); skip malformed entries."""
    if isinstance(payload, Mapping):
        items = payload.get("customFields")
        if items is None:
            items = payload.get("data")
    else:
        items = payload
    if not isinstance(items, list):
        return []

    out: List[CustomFieldDefinition] = []
    for item in items:
        if not isinstance(item, Mapping) or not isinstance(item.get("field_name"), str):
            continue
        try:
            out.append(CustomFieldDefinition.model_validate(dict(item)))
        except ValidationError as e:
            logger.debug("Skipping malformed custom field %r: %s", item.get("field_name"), e)
    return out


def _fetch_definitions(entity_type: str, token: Optional[str]) -> List[CustomFieldDefinition]:
    url = f"{settings.API_BASE_URL.rstrip('/')}/api/custom-fields/entity/{entity_type}"
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    try:
        response = requests.get(url, headers=headers, timeout=settings.CUSTOM_FIELDS_TIMEOUT_S)
    except requests.RequestException as e:
        raise SchemaFetchFailed(f"custom fields request failed: {e}") from e
    if not response.ok:
        raise SchemaFetchFailed(f"custom fields request returned HTTP {response.status_code}")
    try:
        payload = response.json()
    except ValueError as e:
        raise SchemaFetchFailed("custom fields response was not JSON") from e
    return parse_field_definitions(payload)


def load_field_schema(entity_type: Optional[str] = None, token: Optional[str] = None) -> FieldSchema:
    """Fetch and shape the custom field schema; an empty schema on any failure."""
    entity_type = entity_type or settings.RESUME_ENTITY_TYPE
    try:
        definitions = _fetch_definitions(entity_type, token)
    except SchemaFetchFailed as e:
        logger.warning("Custom fields unavailable for %s, continuing without them: %s", entity_type, e.message)
        return FieldSchema()

    schema = build_field_schema(definitions)
    logger.info(
        "Loaded %d custom fields for %s (%d closed-vocabulary)",
        len(schema.fields), entity_type, len(schema.closed),
    )
    return schema

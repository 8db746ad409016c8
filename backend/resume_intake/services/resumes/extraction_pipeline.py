# resume_intake/services/resumes/extraction_pipeline.py
"""
Resume Extraction Pipeline - entry points for the two alternative strategies.

- Heuristic path: offline, deterministic, never calls a model.
- Model-assisted path: fetch the tenant field schema, build the prompt, one
  completion (+ one retry on invalid output), resolve select/radio answers.

The endpoint picks a strategy; a failing model path is never silently replaced
by the heuristic one within the same request.
"""
from __future__ import annotations

import logging
from typing import Optional

from resume_intake.core.errors import TextExtractionEmpty, UnsupportedFileType
from resume_intake.schemas.resume import LocalParseResult, ParsedResume
from resume_intake.services.resumes.documents import extract_text_from_bytes, is_resume_file
from resume_intake.services.resumes.extraction.deterministic import parse_resume_text
from resume_intake.services.resumes.extraction.llm_extraction import CompletionClient, parse_with_model
from resume_intake.services.resumes.field_schema import load_field_schema

logger = logging.getLogger("resumes.pipeline")


def extract_upload_text(filename: Optional[str], content_type: Optional[str], data: bytes) -> str:
    """Validate the upload type and return its non-blank text."""
    if not is_resume_file(filename or "", content_type or ""):
        raise UnsupportedFileType()
    text = extract_text_from_bytes(filename, content_type, data)
    if not text or not text.strip():
        raise TextExtractionEmpty()
    logger.info("Extracted %d chars from %s", len(text), filename or "upload")
    return text


def parse_resume_heuristic(text: str) -> LocalParseResult:
    if not text or not text.strip():
        raise TextExtractionEmpty()
    return parse_resume_text(text)


def parse_resume_with_model(
    text: str,
    *,
    token: Optional[str] = None,
    entity_type: Optional[str] = None,
    client: Optional[CompletionClient] = None,
) -> ParsedResume:
    """Schema fetch -> prompt -> completion/validation (max 2 attempts) -> ParsedResume."""
    if not text or not text.strip():
        raise TextExtractionEmpty()
    schema = load_field_schema(entity_type, token)
    parsed = parse_with_model(text, schema, client)
    logger.info(
        "Parsed resume: %d roles, %d education entries, %d custom fields",
        len(parsed.work_experience), len(parsed.education), len(parsed.custom_fields or {}),
    )
    return parsed

"""Resume parse endpoints: model-assisted parsing with tenant custom fields, and the offline heuristic parser.

Both accept a multipart ``file`` and answer ``{"success": bool, ...}``. Failures
carry a user-facing ``message`` and the status code of the error kind.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, File, Request, UploadFile
from fastapi.responses import JSONResponse

from resume_intake.core.errors import ResumeParsingError
from resume_intake.services.resumes import extraction_pipeline as pipeline

router = APIRouter(prefix="/api", tags=["parse"])
logger = logging.getLogger("api.parse")

USE_POST_MESSAGE = "Use POST to parse a resume file."


def _fail(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _bearer_token(request: Request) -> Optional[str]:
    """Token forwarded to the field-schema service: Authorization header, else the 'token' cookie."""
    auth = request.headers.get("authorization") or ""
    if auth.lower().startswith("bearer "):
        return auth[7:].strip() or None
    return request.cookies.get("token")


def _read_upload(file: Optional[UploadFile]) -> Optional[bytes]:
    if file is None:
        return None
    data = file.file.read()
    return data or None


@router.post("/parse-resume")
def parse_resume(request: Request, file: Optional[UploadFile] = File(default=None)):
    """Model-assisted parse. Returns {"success": true, "parsed": ParsedResume}."""
    data = _read_upload(file)
    if data is None:
        return _fail(400, "No file provided")
    try:
        text = pipeline.extract_upload_text(file.filename, file.content_type, data)
        parsed = pipeline.parse_resume_with_model(text, token=_bearer_token(request))
    except ResumeParsingError as e:
        logger.warning("Parse resume failed (%s): %s", type(e).__name__, e.message)
        return _fail(e.status_code, e.message)
    except Exception as e:
        logger.exception("Parse resume error: %s", e)
        return _fail(500, str(e) or "Resume parsing failed.")
    return {"success": True, "parsed": parsed.to_response()}


@router.post("/admin/parse-resume")
def parse_resume_local(file: Optional[UploadFile] = File(default=None)):
    """Offline heuristic parse. Returns {"success": true, "result": LocalParseResult}."""
    data = _read_upload(file)
    if data is None:
        return _fail(400, "No file provided")
    try:
        text = pipeline.extract_upload_text(file.filename, file.content_type, data)
        result = pipeline.parse_resume_heuristic(text)
    except ResumeParsingError as e:
        logger.warning("Local parse failed (%s): %s", type(e).__name__, e.message)
        return _fail(e.status_code, e.message)
    except Exception as e:
        logger.exception("Local parse error: %s", e)
        return _fail(500, str(e) or "Resume parsing failed.")
    return {"success": True, "result": result.model_dump()}


@router.get("/parse-resume")
def parse_resume_get():
    return _fail(400, USE_POST_MESSAGE)


@router.get("/admin/parse-resume")
def parse_resume_local_get():
    return _fail(400, USE_POST_MESSAGE)

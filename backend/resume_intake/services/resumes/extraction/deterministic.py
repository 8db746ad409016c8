"""Offline rule-based resume extraction: contacts, section boundaries, a name guess and a skills list, with no model call."""
# -----------------------------------------------------------------------------
# PURPOSE
# - Deterministic signals pulled from plain text with no markup to rely on:
#   * Contacts (emails, phone-like strings; permissive, no area-code checks)
#   * Section bodies keyed by canonical header concept
#   * A conservative name guess from the first lines
# - No inference of titles/companies/dates inside sections: the experience
#   section is returned whole, education is truncated to a school line.
# - Total over any input string (including ""); never returns None fields.
# -----------------------------------------------------------------------------
from __future__ import annotations

import re
from typing import Dict, List, Tuple

from resume_intake.schemas.resume import LocalEducation, LocalParseResult, LocalPosition

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_CANDIDATE_RE = re.compile(
    r"(?:\+?\d{1,3}[\s.-]?)?\(?\d{2,4}\)?[\s.-]?\d{2,4}[\s.-]?\d{2,4}[\s.-]?\d{0,4}"
)
NAME_RE = re.compile(r"^[A-Za-z\s.'-]+$")
SKILL_SPLIT_RE = re.compile(r"[,;•·|–\-\n]")

MAX_CONTACTS = 3
MIN_PHONE_LEN = 10
NAME_SCAN_LINES = 5
EDUCATION_SNIPPET_CHARS = 200
PREAMBLE = "preamble"

# (synonym, concept) in matching order; first synonym that fits a line wins
SECTION_SYNONYMS: Tuple[Tuple[str, str], ...] = (
    ("professional experience", "experience"),
    ("work experience", "experience"),
    ("experience", "experience"),
    ("employment", "experience"),
    ("education", "education"),
    ("academic", "education"),
    ("qualifications", "education"),
    ("technical skills", "skills"),
    ("core competencies", "skills"),
    ("skills", "skills"),
    ("expertise", "skills"),
    ("summary", "summary"),
    ("objective", "summary"),
    ("profile", "summary"),
    ("about", "summary"),
    ("projects", "projects"),
    ("certifications", "certifications"),
    ("languages", "languages"),
    ("contact", "contact"),
    ("references", "references"),
)


def _dedupe_preserve_order(items: List[str], limit: int) -> List[str]:
    seen = set()
    out: List[str] = []
    for it in items:
        if it in seen:
            continue
        seen.add(it)
        out.append(it)
        if len(out) >= limit:
            break
    return out


def extract_emails(text: str) -> List[str]:
    """Up to three unique emails in order of first appearance."""
    return _dedupe_preserve_order(EMAIL_RE.findall(text or ""), MAX_CONTACTS)


def _looks_like_phone(raw: str) -> bool:
    digits = re.sub(r"\D", "", raw)
    return len(raw) >= MIN_PHONE_LEN and re.search(r"\d{3,}", digits) is not None


def extract_phones(text: str) -> List[str]:
    """
    Up to three unique phone-like strings in order of first appearance.
    Short numeric fragments (postal codes, years) are rejected by the length floor.
    """
    candidates = [m.group(0).strip() for m in PHONE_CANDIDATE_RE.finditer(text or "")]
    return _dedupe_preserve_order([c for c in candidates if _looks_like_phone(c)], MAX_CONTACTS)


def _match_header(line: str) -> Tuple[str, str] | None:
    """Return (synonym, concept) when the trimmed line is a section header."""
    lower = line.lower()
    for synonym, concept in SECTION_SYNONYMS:
        if lower == synonym or lower.startswith(synonym + ":"):
            return synonym, concept
    return None


def segment(text: str) -> Dict[str, str]:
    """
    Split text into section bodies keyed by canonical concept.

    Lines before the first header go under "preamble". A header line may carry
    inline content ("Skills: Python, SQL"); the remainder after the label and
    colon starts the new body. Repeated concepts are concatenated.
    """
    sections: Dict[str, str] = {}
    current = PREAMBLE
    buf: List[str] = []

    def flush() -> None:
        body = re.sub(r"\s+", " ", " ".join(buf)).strip()
        if not body:
            return
        # a repeated concept extends the earlier body instead of being ignored
        sections[current] = f"{sections[current]} {body}" if current in sections else body

    for raw_line in (text or "").splitlines():
        line = raw_line.strip()
        if not line:
            continue
        hit = _match_header(line)
        if hit is None:
            buf.append(line)
            continue
        flush()
        synonym, current = hit
        remainder = re.sub(r"^:?\s*", "", line[len(synonym):])
        buf = [remainder] if remainder else []
    flush()
    return sections


def guess_name(text: str) -> str:
    """First of the leading non-blank lines that reads like a bare personal name, else ""."""
    lines = [ln.strip() for ln in (text or "").splitlines() if ln.strip()]
    for line in lines[:NAME_SCAN_LINES]:
        if "@" in line or PHONE_CANDIDATE_RE.search(line):
            continue
        if 2 <= len(line) <= 60 and NAME_RE.match(line):
            return line
    return ""


def split_skills(skills_text: str) -> List[str]:
    return [s.strip() for s in SKILL_SPLIT_RE.split(skills_text or "") if s.strip()]


def parse_resume_text(text: str) -> LocalParseResult:
    """Heuristic parse of raw resume text into the local-parser result shape."""
    emails = extract_emails(text)
    phones = extract_phones(text)
    sections = segment(text)

    experience_text = sections.get("experience", "")
    education_text = sections.get("education", "")
    skills = split_skills(sections.get("skills", ""))

    education = (
        [LocalEducation(school_name=education_text[:EDUCATION_SNIPPET_CHARS].strip())]
        if education_text
        else []
    )

    return LocalParseResult(
        candidate_name=guess_name(text),
        candidate_email=emails[0] if emails else "",
        candidate_phone=phones[0] if phones else "",
        candidate_address="",
        positions=[LocalPosition(skills=skills, job_details=experience_text)],
        education_qualifications=education,
    )

# resume_intake/schemas/resume.py
# -----------------------------------------------------------------------------
# Wire contracts returned by the parse endpoints.
# - ParsedResume: model-assisted output. Every string is trimmed, missing data is
#   "" (never None), every list is present. custom_fields is optional and only
#   holds entries with a resolved value, keyed by field label.
# - LocalParseResult: legacy shape produced by the offline heuristic parser and
#   consumed by the admin import flow.
# -----------------------------------------------------------------------------
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class EducationItem(BaseModel):
    degree: str = ""
    institution: str = ""
    year: str = ""


class WorkExperienceItem(BaseModel):
    company: str = ""
    job_title: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class ParsedResume(BaseModel):
    full_name: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    mobile_phone: str = ""
    address: str = ""  # street address (line 1)
    address_2: str = ""  # apt, suite, unit, floor
    city: str = ""
    state: str = ""
    zip: str = ""
    location: str = ""  # unsplit location as returned by the model
    linkedin: str = ""
    portfolio: str = ""
    current_job_title: str = ""
    total_experience_years: str = ""
    skills: List[str] = Field(default_factory=list)
    education: List[EducationItem] = Field(default_factory=list)
    work_experience: List[WorkExperienceItem] = Field(default_factory=list)
    custom_fields: Optional[Dict[str, str]] = None

    def to_response(self) -> dict:
        """Serialize for the wire: custom_fields is dropped when empty."""
        return self.model_dump(exclude_none=True)


# Top-level scalar keys in wire order; shared by the coercion step and the prompt skeleton.
SCALAR_FIELDS: tuple[str, ...] = (
    "full_name", "first_name", "last_name", "email", "phone", "mobile_phone",
    "address", "address_2", "city", "state", "zip", "location",
    "linkedin", "portfolio", "current_job_title", "total_experience_years",
)
EDUCATION_FIELDS: tuple[str, ...] = tuple(EducationItem.model_fields)
WORK_EXPERIENCE_FIELDS: tuple[str, ...] = tuple(WorkExperienceItem.model_fields)


class LocalPosition(BaseModel):
    position_name: str = ""
    company_name: str = ""
    skills: List[str] = Field(default_factory=list)
    job_details: str = ""


class LocalEducation(BaseModel):
    school_name: str = ""
    degree_type: str = ""
    specialization_subjects: str = ""


class LocalParseResult(BaseModel):
    candidate_name: str = ""
    candidate_email: str = ""
    candidate_phone: str = ""
    candidate_address: str = ""
    positions: List[LocalPosition] = Field(default_factory=list)
    education_qualifications: List[LocalEducation] = Field(default_factory=list)

    def to_parsed_resume(self) -> ParsedResume:
        """Map the heuristic result onto the ParsedResume contract."""
        name = self.candidate_name.strip()
        parts = name.split()
        first = parts[0] if parts else ""
        last = " ".join(parts[1:]) if len(parts) > 1 else ""
        skills = self.positions[0].skills if self.positions else []
        return ParsedResume(
            full_name=name,
            first_name=first,
            last_name=last,
            email=self.candidate_email,
            phone=self.candidate_phone,
            address=self.candidate_address,
            skills=list(skills),
            education=[
                EducationItem(degree=e.degree_type, institution=e.school_name)
                for e in self.education_qualifications
            ],
            work_experience=[
                WorkExperienceItem(
                    company=p.company_name,
                    job_title=p.position_name,
                    description=p.job_details,
                )
                for p in self.positions
                if p.job_details
            ],
        )

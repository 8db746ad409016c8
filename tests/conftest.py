from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from resume_intake.schemas.custom_field import CustomFieldDefinition
from resume_intake.services.resumes.field_schema import build_field_schema


class FakeCompletionClient:
    """Returns scripted completions in order and records every call."""

    def __init__(self, *responses: str):
        self.responses = list(responses)
        self.calls: List[List[Dict[str, str]]] = []
        self.temperatures: List[float] = []

    def chat_text(self, messages, timeout: Optional[int] = None, *, temperature: float = 0) -> str:
        self.calls.append(messages)
        self.temperatures.append(temperature)
        return self.responses.pop(0)


SAMPLE_RESUME = """Jane Q. Doe
jane.doe@example.com | (415) 555-2671
San Francisco, CA 94105

Summary
Backend engineer with eight years of experience.

Work Experience
Senior Engineer, Acme Corp, 2019 - Present
Built billing services in Python.

Education
B.Sc. Computer Science, State University, 2015

Skills: Python, SQL; Docker | Kubernetes
"""


@pytest.fixture
def sample_resume() -> str:
    return SAMPLE_RESUME


@pytest.fixture
def employment_schema():
    return build_field_schema([
        CustomFieldDefinition(
            field_name="employment_type",
            field_label="Employment Type",
            field_type="select",
            options=["Full-Time", "Part-Time", "Freelance"],
        ),
        CustomFieldDefinition(field_name="desired_salary", field_label="Desired Salary", field_type="text"),
        CustomFieldDefinition(field_name="internal_notes", field_label="Internal Notes", field_type="text", is_hidden=True),
    ])

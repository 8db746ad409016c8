# resume_intake/services/resumes/prompt_builder.py
"""
Prompt/Schema Builder - compiles the base extraction rules and the tenant's
custom field schema into the system instructions sent with every extraction call.
"""
from __future__ import annotations

import json
from typing import List

from resume_intake.schemas.custom_field import FieldClassification, FieldSchema
from resume_intake.schemas.resume import EDUCATION_FIELDS, SCALAR_FIELDS, WORK_EXPERIENCE_FIELDS
from resume_intake.services.common.llm_client import load_prompt

BASE_PROMPT_PATH = "resumes/resume_extraction.prompt.txt"

# Shown to the model to bias it toward semantic rather than literal equality
FUZZY_MATCH_EXAMPLES = (
    ("Freelancer", "Freelance"),
    ("full time", "Full-Time"),
    ("Contractor", "Contract"),
    ("Bachelors degree", "Bachelor's Degree"),
)

USER_PROMPT_PREFIX = "Extract structured information from the following resume text:\n\n"


def _q(s: str) -> str:
    """JSON-quote a string for inline use in the prompt."""
    return json.dumps(s, ensure_ascii=False)


def _comment_safe(s: str) -> str:
    return s.replace('"', "'").replace("\n", " ").strip()


def build_closed_vocabulary_block(schema: FieldSchema) -> str:
    """Per-field instructions that restrict select/radio answers to their options."""
    closed: List[FieldClassification] = [schema.closed[n] for n in schema.field_names if n in schema.closed]
    if not closed:
        return ""

    lines = [
        "CUSTOM FIELDS WITH FIXED OPTIONS (important):",
        "- For each key below, the value in \"custom_fields\" MUST be exactly one of the listed options "
        "(same spelling and casing) or \"\" if the resume gives no evidence.",
        "- Choose the option with the same meaning even when the resume words it differently, for example:",
    ]
    for said, option in FUZZY_MATCH_EXAMPLES:
        lines.append(f"    resume says {_q(said)} -> answer {_q(option)}")
    lines.append("- Never return a value that is not in the list.")
    for c in closed:
        options = ", ".join(_q(o) for o in c.options)
        lines.append(f"- {_q(c.name)} ({_comment_safe(c.label)}): one of [{options}]")
    return "\n".join(lines)


def build_json_skeleton(schema: FieldSchema) -> str:
    """The exact output structure, with an inline comment per custom field."""
    indent = "  "
    rows: List[str] = [f'{indent}"{key}": ""' for key in SCALAR_FIELDS]
    rows.append(f'{indent}"skills": []')

    def object_list(key: str, fields) -> str:
        inner = ",\n".join(f'{indent * 3}"{f}": ""' for f in fields)
        return f'{indent}"{key}": [\n{indent * 2}{{\n{inner}\n{indent * 2}}}\n{indent}]'

    rows.append(object_list("education", EDUCATION_FIELDS))
    rows.append(object_list("work_experience", WORK_EXPERIENCE_FIELDS))

    if not schema.is_empty:
        entries = []
        for f in schema.fields:
            comment = f"value for: {_comment_safe(f.label)}"
            c = schema.classification_for(f.field_name)
            if c is not None:
                comment += f"; allowed values: {' | '.join(_comment_safe(o) for o in c.options)}"
            entries.append(f"{indent * 2}{_q(f.field_name)}: \"\"  // {comment}")
        rows.append(f'{indent}"custom_fields": {{\n' + ",\n".join(entries) + f"\n{indent}}}")

    return "{\n" + ",\n".join(rows) + "\n}"


def build_system_prompt(schema: FieldSchema) -> str:
    """Base rules + closed-vocabulary rules + JSON skeleton."""
    parts = [load_prompt(BASE_PROMPT_PATH).strip()]

    vocab = build_closed_vocabulary_block(schema)
    if vocab:
        parts.append(vocab)

    parts.append(
        "Return JSON in this exact structure (use exact keys; put extracted value for each custom_fields key):\n"
        + build_json_skeleton(schema)
        + "\nIf a section does not exist, return an empty array."
    )
    return "\n\n".join(parts)


def build_user_prompt(text: str) -> str:
    return USER_PROMPT_PREFIX + text

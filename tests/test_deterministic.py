import re

import pytest

from resume_intake.services.resumes.extraction.deterministic import (
    extract_emails,
    extract_phones,
    guess_name,
    parse_resume_text,
    segment,
    split_skills,
)


def _no_none(value):
    if isinstance(value, dict):
        return all(_no_none(v) for v in value.values())
    if isinstance(value, list):
        return all(_no_none(v) for v in value)
    return value is not None


def test_extract_emails_dedupes_and_keeps_order():
    assert extract_emails("a@b.com, a@b.com, c@d.org") == ["a@b.com", "c@d.org"]


def test_extract_emails_caps_at_three():
    text = "one@x.io two@x.io three@x.io four@x.io"
    assert extract_emails(text) == ["one@x.io", "two@x.io", "three@x.io"]


def test_extract_phones_dedupes_and_caps_at_three():
    text = "(415) 555-2671, (212) 555-0199, (415) 555-2671, (646) 555-0133, (310) 555-0144"
    assert extract_phones(text) == ["(415) 555-2671", "(212) 555-0199", "(646) 555-0133"]


def test_extract_emails_accepts_plus_and_percent():
    assert extract_emails("reach me: first.last+jobs@mail.example.co.uk") == ["first.last+jobs@mail.example.co.uk"]


def test_extract_phones_keeps_full_numbers_and_drops_extension_digit():
    phones = extract_phones("Call (415) 555-2671 or 415.555.2671 ext 2")
    assert any(len(re.sub(r"\D", "", p)) == 10 for p in phones)
    assert "2" not in phones
    assert phones[0] == "(415) 555-2671"


def test_extract_phones_rejects_postal_codes_and_years():
    assert extract_phones("San Francisco, CA 94105 since 2019") == []


def test_extract_phones_accepts_country_code():
    phones = extract_phones("Mobile: +1 415-555-2671")
    assert phones
    assert "4155552671" in re.sub(r"\D", "", phones[0])


def test_segment_basic_sections():
    text = "EXPERIENCE\nDid things\nEDUCATION\nBA Somewhere"
    assert segment(text) == {"experience": "Did things", "education": "BA Somewhere"}


def test_segment_preamble_and_inline_header_content():
    text = "Jane Doe\njane@x.com\n\nSkills: Python, SQL\nDocker"
    sections = segment(text)
    assert sections["preamble"] == "Jane Doe jane@x.com"
    assert sections["skills"] == "Python, SQL Docker"


def test_segment_maps_synonyms_to_canonical_keys():
    text = "Professional Experience\nBuilt APIs\nAcademic\nMIT\nCore Competencies\nLeadership\nObjective\nGrow"
    assert segment(text) == {
        "experience": "Built APIs",
        "education": "MIT",
        "skills": "Leadership",
        "summary": "Grow",
    }


def test_segment_repeated_concept_is_concatenated():
    text = "Experience\nRole A\nEmployment\nRole B"
    assert segment(text) == {"experience": "Role A Role B"}


def test_segment_sentence_starting_with_header_word_is_body():
    text = "Summary\nExperience with Python and Go"
    assert segment(text) == {"summary": "Experience with Python and Go"}


def test_segment_collapses_whitespace_and_drops_empty_sections():
    text = "Education\n\n\nSkills\n   Python    and   SQL   "
    assert segment(text) == {"skills": "Python and SQL"}


def test_guess_name_skips_contact_lines():
    assert guess_name("john@x.com\n555-123-4567\nJohn Smith\nEngineer") == "John Smith"


def test_guess_name_only_scans_first_five_lines():
    text = "\n".join(["jane@x.com"] * 5 + ["Jane Doe"])
    assert guess_name(text) == ""


def test_guess_name_rejects_digits_and_long_lines():
    assert guess_name("Resume 2024\n" + "A" * 61) == ""


def test_split_skills_on_separators():
    assert split_skills("Python, SQL; Docker • AWS · Git | Linux") == [
        "Python", "SQL", "Docker", "AWS", "Git", "Linux",
    ]


def test_parse_resume_text_full(sample_resume):
    result = parse_resume_text(sample_resume)

    assert result.candidate_name == "Jane Q. Doe"
    assert result.candidate_email == "jane.doe@example.com"
    assert result.candidate_phone == "(415) 555-2671"
    assert result.candidate_address == ""
    assert len(result.positions) == 1
    assert result.positions[0].skills == ["Python", "SQL", "Docker", "Kubernetes"]
    assert result.positions[0].job_details.startswith("Senior Engineer, Acme Corp")
    assert result.positions[0].position_name == ""
    assert result.positions[0].company_name == ""
    assert [e.school_name for e in result.education_qualifications] == [
        "B.Sc. Computer Science, State University, 2015"
    ]


def test_parse_resume_text_truncates_education_to_200_chars():
    text = "Education\n" + "x" * 500
    result = parse_resume_text(text)
    assert len(result.education_qualifications[0].school_name) == 200


@pytest.mark.parametrize("text", ["", "   \n\n", "12345", "@@@", "EXPERIENCE", "été\n••"])
def test_parse_resume_text_is_total(text):
    result = parse_resume_text(text)
    dumped = result.model_dump()
    assert _no_none(dumped)
    assert result.education_qualifications == []
    assert len(result.positions) == 1
    assert _no_none(result.to_parsed_resume().model_dump(exclude_none=True))


def test_parse_resume_text_is_idempotent(sample_resume):
    assert parse_resume_text(sample_resume) == parse_resume_text(sample_resume)


def test_heuristic_result_maps_to_parsed_resume(sample_resume):
    parsed = parse_resume_text(sample_resume).to_parsed_resume()

    assert parsed.full_name == "Jane Q. Doe"
    assert parsed.first_name == "Jane"
    assert parsed.last_name == "Q. Doe"
    assert parsed.email == "jane.doe@example.com"
    assert parsed.skills == ["Python", "SQL", "Docker", "Kubernetes"]
    assert len(parsed.work_experience) == 1
    assert parsed.work_experience[0].company == ""
    assert parsed.education[0].institution.startswith("B.Sc.")
    assert parsed.custom_fields is None

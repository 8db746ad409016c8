from resume_intake.services.resumes.address import decompose


def test_structured_parts_are_trimmed_and_kept():
    out = decompose({"address": " 12 Oak Ave ", "address_2": "Apt 4", "city": "Boise ", "state": "ID", "zip": 83702})
    assert out == {"address": "12 Oak Ave", "address_2": "Apt 4", "city": "Boise", "state": "ID", "zip": "83702"}


def test_location_only_becomes_address():
    out = decompose({"location": " Remote - Denver, CO "})
    assert out["address"] == "Remote - Denver, CO"
    assert out["city"] == out["state"] == out["zip"] == out["address_2"] == ""


def test_location_ignored_when_any_part_present():
    out = decompose({"city": "Denver", "location": "Denver, CO"})
    assert out["address"] == ""
    assert out["city"] == "Denver"


def test_address_2_alone_does_not_block_location_fallback():
    out = decompose({"address_2": "Suite 100", "location": "Austin, TX"})
    assert out["address"] == "Austin, TX"
    assert out["address_2"] == "Suite 100"


def test_nothing_at_all():
    assert decompose({}) == {"address": "", "address_2": "", "city": "", "state": "", "zip": ""}

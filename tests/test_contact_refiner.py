"""
Unit tests for contact refinement of extracted profiles.

Tests:
- Email exclusion and replacement
- Fake/implausible phone handling
- Filename-derived names
- Present, trustworthy data is never overwritten
"""

from app.schemas.candidate import CandidateProfile, NOT_SPECIFIED
from app.services.contact_refiner import (
    ContactRefiner,
    find_emails,
    find_phones,
    is_excluded_email,
    is_plausible_phone,
    normalize_phone,
)


class TestContactHelpers:
    """Test the regex helpers used by the refiner"""

    def test_excluded_emails(self):
        assert is_excluded_email("candidate@example.com")
        assert is_excluded_email("john.doe@EXAMPLE.COM")
        assert is_excluded_email("qa@test.com")
        assert is_excluded_email("someone@dummy.org")
        assert not is_excluded_email("jane@corp.io")
        assert not is_excluded_email(None)

    def test_find_emails_skips_excluded(self):
        text = "Contact: candidate@example.com or jane.roe@corp.io, backup jroe@mail.dev"
        assert find_emails(text) == ["jane.roe@corp.io", "jroe@mail.dev"]

    def test_normalize_phone(self):
        assert normalize_phone("+1 (415) 867-5309") == "+14158675309"

    def test_plausible_phone_bounds(self):
        assert is_plausible_phone("+1 415 867 5309")
        assert not is_plausible_phone("867-5309")  # too short
        assert not is_plausible_phone("+1-555-123-4567")  # fake pattern
        assert not is_plausible_phone("1234567890123456")  # too long

    def test_find_phones_in_text(self):
        text = "Phone: +1-555-123-4567\nMobile: (415) 867-5309"
        assert find_phones(text) == ["4158675309"]

    def test_year_ranges_are_not_phones(self):
        assert find_phones("Acme Tech 2019 - 2020 2021") == []
        assert find_phones("Initech 2015 - 2018\nGlobex 2018 - 2023") == []


class TestContactRefiner:
    """Test ContactRefiner.refine"""

    def setup_method(self):
        self.refiner = ContactRefiner()

    def test_replaces_excluded_email_with_first_valid(self):
        profile = CandidateProfile(name="Jane Roe", email="candidate@example.com")
        text = "Jane Roe\ncandidate@example.com\njane@corp.io"

        refined = self.refiner.refine(text, "resume.pdf", profile)

        assert refined.email == "jane@corp.io"

    def test_excluded_email_without_replacement_becomes_not_specified(self):
        profile = CandidateProfile(name="John Doe", email="john.doe@example.com")

        refined = self.refiner.refine("John Doe\njohn.doe@example.com", "resume.pdf", profile)

        assert refined.email == NOT_SPECIFIED

    def test_missing_phone_found_in_text(self):
        profile = CandidateProfile(name="Jane Roe", email="jane@corp.io")

        refined = self.refiner.refine("Jane Roe\nCell: +44 20 7946 0958", "resume.pdf", profile)

        assert refined.phone == "+442079460958"

    def test_fake_phone_is_reset(self):
        profile = CandidateProfile(name="Jane Roe", phone="+1-555-123-4567")

        refined = self.refiner.refine("Jane Roe\n+1-555-123-4567", "resume.pdf", profile)

        assert refined.phone == NOT_SPECIFIED

    def test_missing_name_comes_from_filename(self):
        profile = CandidateProfile(email="jane@corp.io")

        refined = self.refiner.refine("no name here", "jane_roe-resume.pdf", profile)

        assert refined.name == "Jane Roe"

    def test_single_word_filename_is_not_a_name(self):
        profile = CandidateProfile(email="jane@corp.io")

        refined = self.refiner.refine("no name here", "resume.pdf", profile)

        assert refined.name == NOT_SPECIFIED

    def test_never_overwrites_present_values(self):
        profile = CandidateProfile(
            name="Jane Roe",
            email="jane@corp.io",
            phone="+1 415 867 5309",
            designation="Backend Engineer",
            past_companies=["Initech Solutions"],
            skillset=["Python"],
        )
        text = "Other Person\nother@corp.io\n+44 20 7946 0958"

        refined = self.refiner.refine(text, "other_person.pdf", profile)

        assert refined == profile

    def test_does_not_touch_designation_or_lists(self):
        profile = CandidateProfile(email="candidate@example.com", skillset=["React"])

        refined = self.refiner.refine("jane@corp.io", "resume.pdf", profile)

        assert refined.designation == NOT_SPECIFIED
        assert refined.past_companies == []
        assert refined.skillset == ["React"]

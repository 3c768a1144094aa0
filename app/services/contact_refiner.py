"""
Contact refinement for extracted candidate profiles.

Whatever strategy produced a profile, its name/email/phone get a second,
independent pass over the raw text and filename. Fields that already hold
trustworthy data are never overwritten; designation, past companies and
skillset are left untouched.
"""

import logging
import re
from typing import List, Optional
from app.schemas.candidate import CandidateProfile, NOT_SPECIFIED, is_missing
from app.services.text_extraction import name_from_filename

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Placeholder / sample addresses that must never be treated as real contact data
EXCLUDED_EMAIL_RE = re.compile(r"example\.com|test\.com|dummy\.", re.IGNORECASE)

# Phone-shaped runs: optional country code, then digit groups with at most one
# separator between them; never spans a line break
PHONE_CANDIDATE_RE = re.compile(
    r"(?:\+?\d{1,3}[ \t.-]?)?\(?\d{2,4}\)?[ \t.-]?\d{3,4}[ \t.-]?\d{3,4}(?:[ \t.-]?\d{1,4})?"
)

FAKE_PHONE_RE = re.compile(r"555|123456|000000")

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


def is_excluded_email(email: Optional[str]) -> bool:
    return bool(email) and bool(EXCLUDED_EMAIL_RE.search(email))


def find_emails(text: str) -> List[str]:
    """Every non-excluded email in document order."""
    return [e for e in EMAIL_RE.findall(text or "") if not is_excluded_email(e)]


def normalize_phone(raw: str) -> str:
    """Strip everything except digits and '+'."""
    return re.sub(r"[^\d+]", "", raw or "")


def is_plausible_phone(raw: Optional[str]) -> bool:
    normalized = normalize_phone(raw or "")
    digits = sum(ch.isdigit() for ch in normalized)
    if digits < MIN_PHONE_DIGITS or digits > MAX_PHONE_DIGITS:
        return False
    return not FAKE_PHONE_RE.search(normalized)


def find_phones(text: str) -> List[str]:
    """Every plausible phone number in document order, normalized."""
    phones = []
    for match in PHONE_CANDIDATE_RE.findall(text or ""):
        if is_plausible_phone(match):
            phones.append(normalize_phone(match))
    return phones


class ContactRefiner:
    """
    Fills or corrects name/email/phone on a profile.

    - email: replaced when missing or excluded (example.com, test.com, dummy.*)
      by the first valid address in the text, else reset to "Not specified"
    - phone: replaced when missing or obviously fake (555, 123456, 000000)
      by the first plausible 10-15 digit number, else reset to "Not specified"
    - name: derived from the filename only when missing
    """

    def refine(self, raw_text: str, filename: str, profile: CandidateProfile) -> CandidateProfile:
        updates = {}

        if is_missing(profile.email) or is_excluded_email(profile.email):
            emails = find_emails(raw_text)
            new_email = emails[0] if emails else NOT_SPECIFIED
            if new_email != profile.email:
                logger.info(f"Refined email from text: {new_email}")
                updates["email"] = new_email

        if is_missing(profile.phone) or FAKE_PHONE_RE.search(normalize_phone(profile.phone)):
            phones = find_phones(raw_text)
            new_phone = phones[0] if phones else NOT_SPECIFIED
            if new_phone != profile.phone:
                logger.info(f"Refined phone from text: {new_phone}")
                updates["phone"] = new_phone

        if is_missing(profile.name) and filename:
            guess = name_from_filename(filename)
            if not is_missing(guess):
                logger.info(f"Refined name from filename: {guess}")
                updates["name"] = guess

        if not updates:
            return profile
        return profile.model_copy(update=updates)

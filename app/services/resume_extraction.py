"""
Cascading resume-information extraction.

The orchestrator walks an ordered list of strategies and keeps the first
profile that comes back:

    OpenAI -> Gemini -> spaCy NLP heuristic -> regex heuristic -> filename

A strategy "fails" by raising; the failure is logged and the next strategy
runs. Calls are sequential, never parallel, so latency is the sum of the
failed attempts plus the successful one. Whatever wins is passed through
ContactRefiner and re-validated so the result is always a total profile.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
import spacy
from pydantic import ValidationError as PydanticValidationError
from app.core.config import Settings
from app.schemas.candidate import CandidateProfile, NOT_SPECIFIED, MAX_PAST_COMPANIES, MAX_SKILLS
from app.services.contact_refiner import ContactRefiner, EMAIL_RE, PHONE_CANDIDATE_RE, normalize_phone
from app.services.llm_clients import ChatClient, build_chat_client, parse_json_block
from app.services.text_extraction import is_placeholder, name_from_filename

logger = logging.getLogger(__name__)


class ExtractionStrategyError(Exception):
    """A strategy could not produce a usable profile."""
    pass


# ---------------------------------------------------------------------------
# Shared heuristics
# ---------------------------------------------------------------------------

_SECTION_HEADINGS = (
    r"(?:work\s+|professional\s+|employment\s+)?"
    r"(?:education|experience|summary|projects|certifications?|employment|achievements|interests|references|history)"
)

SKILLS_SECTION_RE = re.compile(
    r"^[ \t]*(?:technical[ \t]+)?skills\b[ \t]*:?(.*?)(?=^[ \t]*" + _SECTION_HEADINGS + r"\b|\Z)",
    re.IGNORECASE | re.MULTILINE | re.DOTALL,
)

DESIGNATION_RE = re.compile(
    r"\b(?:(?:senior|junior|lead|principal|staff|associate)\s+)?"
    r"(?:(?:software|qa|devops|frontend|front-end|backend|back-end|full[\s-]?stack|data|machine\s+learning|cloud|mobile|web)\s+)?"
    r"(?:engineer|developer|programmer|analyst|architect|scientist|manager|team\s+lead|consultant)\b",
    re.IGNORECASE,
)

COMPANY_SUFFIXES = r"(?:Inc|LLC|Ltd|Corp|Company|Technologies|Tech|Solutions|Systems)"

COMPANY_RE = re.compile(
    r"\b(?i:worked[ \t]+at|experience[ \t]+at|at|with)[ \t]+"
    r"([A-Z][A-Za-z&.'-]*(?:[ \t]+[A-Z&][A-Za-z&.'-]*)*[ \t]+" + COMPANY_SUFFIXES + r")\b"
)

NAME_LABEL_RE = re.compile(r"^name\s*:\s*(.+)$", re.IGNORECASE)
CAPS_NAME_RE = re.compile(r"^[A-Z][A-Z'.-]+(?:\s+[A-Z][A-Z'.-]+){1,3}$")
TITLE_NAME_RE = re.compile(r"^[A-Z][a-z'.-]+(?:\s+[A-Z][a-z'.-]+){1,3}$")
NAME_SEARCH_LINES = 10

TECH_VOCABULARY = [
    "React", "Node.js", "TypeScript", "JavaScript", "Python", "Java", "AWS", "Docker",
    "Kubernetes", "PostgreSQL", "MongoDB", "Redis", "Express.js", "GraphQL", "HTML", "CSS",
    "Selenium", "Pytest", "Robot Framework", "Azure", "Jenkins", "GitLab", "GitHub Actions",
    "Django", "FastAPI", "Flask", "Terraform", "SQL",
]
TECH_VOCABULARY_RE = re.compile(
    r"(?<![\w.])(" + "|".join(re.escape(t) for t in TECH_VOCABULARY) + r")(?!\w)",
    re.IGNORECASE,
)
_CANONICAL_TECH = {t.lower(): t for t in TECH_VOCABULARY}


def _tidy(value: str) -> str:
    value = " ".join(value.split())
    return value.title() if value.isupper() else value


def find_skills_section(text: str) -> List[str]:
    """Items of the first "Skills"/"Technical Skills" block, up to the next heading."""
    match = SKILLS_SECTION_RE.search(text or "")
    if not match:
        return []

    skills = []
    for item in re.split(r"[\n,;|•·]+|\s{2,}", match.group(1)):
        # "Languages: Python" -> "Python"
        item = item.split(":")[-1].strip().strip("-*• \t")
        if len(item) > 1 and not re.fullmatch(r"[\W_]+", item):
            skills.append(item)
    return skills


def find_vocabulary_skills(text: str) -> List[str]:
    return [_CANONICAL_TECH[m.lower()] for m in TECH_VOCABULARY_RE.findall(text or "")]


def find_designation(text: str) -> Optional[str]:
    match = DESIGNATION_RE.search(text or "")
    return _tidy(match.group(0)) if match else None


def find_companies(text: str) -> List[str]:
    return [_tidy(m) for m in COMPANY_RE.findall(text or "")]


def find_email(text: str) -> Optional[str]:
    match = EMAIL_RE.search(text or "")
    return match.group(0) if match else None


def find_phone(text: str) -> Optional[str]:
    for match in PHONE_CANDIDATE_RE.finditer(text or ""):
        digits = sum(ch.isdigit() for ch in normalize_phone(match.group(0)))
        if 10 <= digits <= 15:
            return match.group(0).strip()
    return None


def find_name_line(text: str) -> Optional[str]:
    """A person-looking line near the top of the document."""
    lines = [line.strip() for line in (text or "").splitlines() if line.strip()]
    for line in lines[:NAME_SEARCH_LINES]:
        label = NAME_LABEL_RE.match(line)
        if label:
            return _tidy(label.group(1))
        if "@" in line or any(ch.isdigit() for ch in line):
            continue
        if DESIGNATION_RE.search(line) or re.match(_SECTION_HEADINGS, line, re.IGNORECASE):
            continue
        if re.search(r"\b(?:resume|curriculum|vitae|skills)\b", line, re.IGNORECASE):
            continue
        if CAPS_NAME_RE.match(line) or TITLE_NAME_RE.match(line):
            return _tidy(line)
    return None


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class ExtractionStrategy(ABC):
    """One way of turning resume text into a CandidateProfile."""

    name: str = "strategy"

    @abstractmethod
    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        """
        Raises:
            Exception: Any failure; the orchestrator moves on to the next strategy
        """
        pass


EXTRACTION_SYSTEM_PROMPT = (
    "You are an expert resume parser. Extract candidate information and "
    "return ONLY a valid JSON object."
)

EXTRACTION_PROMPT_TEMPLATE = """You are an expert resume parser. Extract the following information from this resume text and return ONLY a valid JSON object with these exact fields:

{{
  "name": "Full Name",
  "email": "Email Address",
  "phone": "Phone Number",
  "designation": "Current/Recent Job Title",
  "pastCompanies": ["Company 1", "Company 2", "Company 3"],
  "skillset": ["Skill 1", "Skill 2", "Skill 3", "Skill 4", "Skill 5"]
}}

Rules:
- Extract the person's full name (first and last name), usually at the top or in a header
- Extract the primary email address (never example/test addresses like candidate@example.com)
- Extract the primary phone number (look for +1, country codes, or standard formats)
- Extract their current or most recent job title
- Extract up to {max_companies} past companies from the experience section
- Extract up to {max_skills} key technical skills, programming languages, tools, or technologies
- If any field cannot be found, use "Not specified" for text fields or an empty array for arrays
- Return ONLY the JSON object, no other text or explanations

Resume text:
{resume_text}
"""


def build_extraction_prompt(resume_text: str) -> str:
    return EXTRACTION_PROMPT_TEMPLATE.format(
        max_companies=MAX_PAST_COMPANIES,
        max_skills=MAX_SKILLS,
        resume_text=resume_text,
    )


class LLMExtractionStrategy(ExtractionStrategy):
    """Strict JSON extraction through a hosted LLM."""

    def __init__(self, client: ChatClient):
        self.client = client
        self.name = f"{client.provider_name}-llm"

    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        logger.info(f"Sending resume to {self.client.provider_name} for extraction...")
        reply = self.client.complete(EXTRACTION_SYSTEM_PROMPT, build_extraction_prompt(raw_text))
        data = parse_json_block(reply)
        try:
            return CandidateProfile.model_validate(data)
        except PydanticValidationError as e:
            raise ExtractionStrategyError(f"{self.client.provider_name} reply failed validation: {e}")


_NLP_CACHE: Dict[str, Any] = {}


def _get_nlp(model_name: str):
    if model_name not in _NLP_CACHE:
        _NLP_CACHE[model_name] = spacy.load(model_name, disable=["parser", "lemmatizer"])
    return _NLP_CACHE[model_name]


class NLPExtractionStrategy(ExtractionStrategy):
    """
    spaCy named-entity recognition for the name, regex for everything else.

    Only accepted when a PERSON entity is found.
    """

    name = "spacy-nlp"

    def __init__(self, model_name: str = "en_core_web_sm"):
        self.model_name = model_name

    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        try:
            nlp = _get_nlp(self.model_name)
        except OSError as e:
            raise ExtractionStrategyError(f"spaCy model '{self.model_name}' unavailable: {e}")

        doc = nlp(raw_text[:100_000])
        people = [
            " ".join(ent.text.split())
            for ent in doc.ents
            if ent.label_ == "PERSON" and "\n" not in ent.text.strip()
        ]
        if not people:
            raise ExtractionStrategyError("No person entity found")

        return CandidateProfile(
            name=people[0],
            email=find_email(raw_text),
            phone=find_phone(raw_text),
            designation=find_designation(raw_text),
            past_companies=find_companies(raw_text),
            skillset=find_skills_section(raw_text),
        )


class RegexExtractionStrategy(ExtractionStrategy):
    """Pattern matching only; works on any text."""

    name = "regex"

    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        skills = find_skills_section(raw_text) + find_vocabulary_skills(raw_text)
        return CandidateProfile(
            name=find_name_line(raw_text),
            email=find_email(raw_text),
            phone=find_phone(raw_text),
            designation=find_designation(raw_text),
            past_companies=find_companies(raw_text),
            skillset=skills,
        )


class FilenameExtractionStrategy(ExtractionStrategy):
    """Last resort: a name guessed from the filename, nothing else."""

    name = "filename"

    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        return CandidateProfile(name=name_from_filename(filename))


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class ExtractionOrchestrator:
    """
    Runs the strategy chain. `extract()` never raises.

    Build it with `from_settings()` for production; pass strategies directly
    in tests. A configuration change means building a new orchestrator.
    """

    def __init__(self, strategies: Sequence[ExtractionStrategy], refiner: Optional[ContactRefiner] = None):
        self.strategies = list(strategies)
        self.refiner = refiner or ContactRefiner()
        self.last_resort = FilenameExtractionStrategy()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtractionOrchestrator":
        strategies: List[ExtractionStrategy] = []
        for provider in ("openai", "gemini"):
            client = build_chat_client(provider, settings, extraction=True)
            if client is None:
                logger.info(f"No API key for {provider}, skipping it in the extraction chain")
                continue
            strategies.append(LLMExtractionStrategy(client))
        if settings.NLP_EXTRACTION_ENABLED:
            strategies.append(NLPExtractionStrategy(settings.SPACY_MODEL))
        strategies.append(RegexExtractionStrategy())
        return cls(strategies)

    @property
    def strategy_names(self) -> List[str]:
        return [s.name for s in self.strategies] + [self.last_resort.name]

    def extract(self, raw_text: str, filename: str) -> CandidateProfile:
        """
        Extract a total CandidateProfile from resume text.

        Args:
            raw_text: Output of the RawTextProvider
            filename: Original upload filename (used for name fallbacks)

        Returns:
            CandidateProfile: Every scalar set (real data or "Not specified"),
            every list defined
        """
        raw_text = raw_text or ""
        filename = filename or "resume.pdf"

        if is_placeholder(raw_text):
            logger.info("Detected minimal fallback text, using filename-based extraction")
            return CandidateProfile(name=name_from_filename(filename))

        profile: Optional[CandidateProfile] = None
        for strategy in self.strategies:
            try:
                profile = strategy.extract(raw_text, filename)
                logger.info(f"Resume extraction succeeded with {strategy.name}")
                break
            except Exception as e:
                logger.warning(f"Extraction strategy {strategy.name} failed, falling back: {e}")

        if profile is None:
            logger.info("All extraction strategies failed, using filename-based extraction")
            profile = self.last_resort.extract(raw_text, filename)

        try:
            profile = self.refiner.refine(raw_text, filename, profile)
        except Exception as e:
            logger.error(f"Contact refinement failed, keeping unrefined profile: {e}")

        # Re-validate so every field is defaulted and capped
        return CandidateProfile.model_validate(profile.model_dump())

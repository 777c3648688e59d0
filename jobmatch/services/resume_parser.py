"""Keyword and pattern based resume parsing."""

import os
import re
from typing import Dict, List

from jobmatch.errors import ValidationError

SKILL_KEYWORDS = [
    "JavaScript", "TypeScript", "Python", "Java", "C++", "React", "Vue", "Angular",
    "Node.js", "Express", "Django", "Flask", "SQL", "MongoDB", "PostgreSQL",
    "AWS", "Azure", "Docker", "Kubernetes", "Git", "Agile", "Scrum",
    "Machine Learning", "Data Science", "Data Analysis", "AI", "Project Management",
]

# Each pattern is matched from the start of one segment (a run of words and
# spaces between punctuation or line breaks) and captures the ``role`` group.
EXPERIENCE_PATTERNS = [
    re.compile(r"[\w ]*?\b(?P<role>(?:Senior|Junior|Lead|Principal) [\w ]+)", re.IGNORECASE),
    re.compile(r"(?P<role>[\w ]+? at [\w ]+)", re.IGNORECASE),
    re.compile(r"(?P<role>[\w ]+ Engineer)\b", re.IGNORECASE),
    re.compile(r"(?P<role>[\w ]+ Developer)\b", re.IGNORECASE),
    re.compile(r"(?P<role>[\w ]+ Manager)\b", re.IGNORECASE),
    re.compile(r"(?P<role>[\w ]+ Analyst)\b", re.IGNORECASE),
]

SEGMENT_SEPARATOR = re.compile(r"[^\w \t]+")
WHITESPACE = re.compile(r"[ \t]+")

MAX_SCAN_LENGTH = 50_000
MAX_SEGMENT_LENGTH = 200

MAX_SKILLS = 10
MAX_EXPERIENCE = 8
MATCHES_PER_PATTERN = 3

DEFAULT_SKILLS = ["Communication", "Problem Solving", "Team Work"]
DEFAULT_EXPERIENCE = ["Professional Experience", "Project Leadership"]

ALLOWED_EXTENSIONS = {".pdf", ".docx", ".txt"}


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def _contains_keyword(text: str, keyword: str) -> bool:
    # Short keywords like "AI" or "Git" need word boundaries to avoid hits in "email" or "digital".
    if len(keyword) <= 3 and keyword.isalpha():
        return re.search(rf"\b{re.escape(keyword)}\b", text, re.IGNORECASE) is not None
    return keyword.lower() in text.lower()


def extract_skills(text: str) -> List[str]:
    return [skill for skill in SKILL_KEYWORDS if _contains_keyword(text, skill)][:MAX_SKILLS]


def _segments(text: str) -> List[str]:
    segments = []
    for raw in SEGMENT_SEPARATOR.split(text[:MAX_SCAN_LENGTH]):
        segment = WHITESPACE.sub(" ", raw).strip()[:MAX_SEGMENT_LENGTH]
        if segment:
            segments.append(segment)
    return segments


def extract_experience(text: str) -> List[str]:
    """
    Collect role-like phrases, at most ``MATCHES_PER_PATTERN`` per pattern.

    Only the first ``MAX_SCAN_LENGTH`` characters are read and every pattern
    is anchored to a segment start, so the cost stays linear in the input.
    """
    segments = _segments(text)
    experience = []
    for pattern in EXPERIENCE_PATTERNS:
        found = 0
        for segment in segments:
            match = pattern.match(segment)
            if match is None:
                continue
            role = match.group("role").strip()
            if role:
                experience.append(role)
                found += 1
            if found == MATCHES_PER_PATTERN:
                break
    return _dedupe(experience)[:MAX_EXPERIENCE]


def parse_resume_text(text: str) -> Dict[str, List[str]]:
    """
    Extract skills and experience lines from plain resume text.

    Falls back to generic entries when nothing is recognized so a resume is
    never stored without any skills to match on.
    """
    skills = extract_skills(text) or list(DEFAULT_SKILLS)
    experience = extract_experience(text) or list(DEFAULT_EXPERIENCE)
    return {"skills": skills, "experience": experience}


def read_upload(filename: str, data: bytes) -> str:
    """
    Return the text of an uploaded resume.

    Only the file type is checked; the bytes are decoded as UTF-8 text.
    Extracting text from real PDF/DOCX binaries is not supported.
    """
    extension = os.path.splitext(filename or "")[1].lower()
    if extension not in ALLOWED_EXTENSIONS:
        raise ValidationError("Please upload a PDF, DOCX or TXT file")

    text = data.decode("utf-8", errors="ignore").strip()
    if not text:
        raise ValidationError("Uploaded resume is empty")
    return text

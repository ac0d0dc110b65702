"""
Rule-based field extractors used when the model is unavailable and to fill
holes in its output.

Every extractor is a pure function of the text and never raises: no match
yields None, an empty list, or a placeholder value.
"""
import re
from typing import Dict, List, Optional

from ..schemas.resume import EducationEntry, ProjectEntry, WorkExperienceEntry

# ============================================================================
# Vocabularies and placeholders
# ============================================================================

SKILL_KEYWORDS = [
    "JavaScript", "React", "Node.js", "Python", "Java", "HTML", "CSS", "SQL",
    "MongoDB", "Express", "AWS", "Docker", "Git", "TypeScript", "Angular", "Vue",
    "PHP", "C++", "C#", ".NET", "Spring", "MySQL", "PostgreSQL", "Redis",
    "Kubernetes", "Azure", "Google Cloud", "REST API", "GraphQL", "Jenkins",
    "CI/CD", "Agile", "Scrum", "Machine Learning", "Data Structures", "Algorithms",
]

SOFT_SKILL_KEYWORDS = [
    "Communication", "Teamwork", "Leadership", "Problem Solving", "Adaptability",
    "Time Management", "Collaboration", "Critical Thinking", "Creativity", "Mentoring",
]

EDUCATION_KEYWORDS = ("university", "college", "institute", "bachelor", "master", "phd", "degree", "diploma")
INSTITUTION_KEYWORDS = ("university", "college", "institute", "school", "academy")
ROLE_KEYWORDS = ("developer", "engineer", "manager", "analyst", "specialist", "consultant", "intern", "lead")

PORTFOLIO_HOSTS = (
    "github.com", "gitlab.com", "behance.net", "dribbble.com",
    "vercel.app", "netlify.app", "github.io", "gitlab.io",
)

SECTION_HEADERS = {
    "summary", "objective", "profile", "about me", "experience", "work experience",
    "professional experience", "employment history", "education", "skills",
    "technical skills", "soft skills", "projects", "personal projects",
    "academic projects", "key projects", "certifications", "certificates",
    "awards", "achievements", "publications", "languages", "interests",
    "hobbies", "references", "contact",
}
PROJECT_HEADERS = {"projects", "personal projects", "academic projects", "key projects"}

DEFAULT_NAME = "Candidate"
DEFAULT_COMPANY = "Company"
DEFAULT_DURATION = "Not specified"
DEFAULT_INSTITUTION = "Institution"
DEFAULT_DEGREE = "Degree not specified"
GENERIC_JOB_DESCRIPTION = (
    "Responsible for various professional duties and projects",
    "Collaborated with team members to achieve organizational goals",
    "Developed and implemented solutions to business challenges",
)

# ============================================================================
# Patterns
# ============================================================================

# Bounded parts keep the scan linear on long dotted runs
EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]{1,64}@[A-Za-z0-9.-]{1,253}\.[A-Za-z]{2,63}\b")
PHONE_RE = re.compile(r"(?<![\d\w])(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}(?!\d)")
URL_RE = re.compile(r"https?://[^\s<>\"'()\[\]]+", re.I)
NAME_WORD_RE = re.compile(r"^[A-Z][a-z]*$")
NAME_LABEL_RE = re.compile(r"\bname\s*:\s*([A-Za-z][A-Za-z .'\-]{1,60})", re.I)
YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
DURATION_RE = re.compile(
    r"\b(?:19|20)\d{2}\s*(?:-|–|—|to)\s*(?:(?:19|20)\d{2}\b|present\b|current\b|now\b)", re.I
)
COMPANY_RE = re.compile(r"(?:\bat|@)\s+([^,|()\n]+)")
COMPANY_END_RE = re.compile(r"\s+(?:19|20)\d{2}|\s+[-–—]\s+|\s+(?:from|since)\s+|\s{2,}")
LINKEDIN_HANDLE_RE = re.compile(r"linkedin\.com/in/([A-Za-z0-9_%\-]+)", re.I)
LINKEDIN_LABEL_RE = re.compile(r"\blinked[\s-]?in\s*:\s*@?([A-Za-z0-9_\-]{3,})", re.I)
GITHUB_LABEL_RE = re.compile(r"\bgithub\s*:\s*@?([A-Za-z0-9\-]{1,39})\b", re.I)
ROLE_RE = re.compile(r"\b(?:%s)s?\b" % "|".join(ROLE_KEYWORDS), re.I)
EDUCATION_PART_SPLIT_RE = re.compile(r"\s*[,|;]\s*|\s+[-–—]\s+")
BULLET_RE = re.compile(r"^[•▪●◦\-*–]\s*")

_TRAILING_URL_PUNCT = ".,;:!?)]}>'\""
# Words that label a link rather than name an account
LINK_LABELS = {
    "linkedin", "github", "gitlab", "portfolio", "website", "web", "blog",
    "email", "e-mail", "mail", "phone", "mobile", "twitter",
}


# ============================================================================
# Helpers
# ============================================================================

def _lines(text: Optional[str]) -> List[str]:
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


def _clean_url(url: str) -> str:
    return url.rstrip(_TRAILING_URL_PUNCT)


def _bare_tokens(text: str) -> List[str]:
    """Whitespace tokens that look like a domain path without a scheme."""
    tokens = []
    for token in text.split():
        token = _clean_url(token.lstrip("(<[\"'"))
        if "@" in token or "://" in token or "." not in token:
            continue
        tokens.append(token)
    return tokens


def _find_year(text: str) -> Optional[str]:
    match = YEAR_RE.search(text or "")
    return match.group(0) if match else None


def _is_header(line: str) -> bool:
    return line.lower().rstrip(":").strip() in SECTION_HEADERS


def _labelled_handle(pattern, text: str) -> Optional[str]:
    """First handle after a "Label:" that is not itself another link label."""
    for match in pattern.finditer(text):
        handle = match.group(1).strip("/")
        if handle and handle.lower() not in LINK_LABELS:
            return handle
    return None


# ============================================================================
# Contact extractors
# ============================================================================

def extract_email(text: str) -> Optional[str]:
    match = EMAIL_RE.search(text or "")
    return match.group(0) if match else None


def extract_phone(text: str) -> Optional[str]:
    match = PHONE_RE.search(text or "")
    return match.group(0).strip() if match else None


def extract_name(text: str) -> str:
    """First Titlecase line of 2-4 words among the first five lines, else a Name: label."""
    for line in _lines(text)[:5]:
        words = line.split()
        if 2 <= len(words) <= 4 and all(NAME_WORD_RE.match(word) for word in words):
            return line

    for line in _lines(text):
        match = NAME_LABEL_RE.search(line)
        if match:
            name = match.group(1).strip(" .-'")
            if name:
                return name

    return DEFAULT_NAME


def extract_linkedin(text: str) -> Optional[str]:
    text = text or ""
    for url in URL_RE.findall(text):
        url = _clean_url(url)
        if "linkedin.com" in url.lower():
            return url

    match = LINKEDIN_HANDLE_RE.search(text)
    handle = match.group(1).strip("/") if match else _labelled_handle(LINKEDIN_LABEL_RE, text)
    if handle:
        return f"https://www.linkedin.com/in/{handle}"
    return None


def _is_portfolio_url(url: str, allow_keyword: bool = True) -> bool:
    lowered = url.lower()
    if any(host in lowered for host in PORTFOLIO_HOSTS):
        return True
    return allow_keyword and "portfolio" in lowered


def extract_portfolio(text: str) -> Optional[str]:
    text = text or ""
    for url in URL_RE.findall(text):
        url = _clean_url(url)
        if _is_portfolio_url(url):
            return url

    for token in _bare_tokens(text):
        if _is_portfolio_url(token, allow_keyword=False):
            return f"https://{token}"

    handle = _labelled_handle(GITHUB_LABEL_RE, text)
    if handle:
        return f"https://github.com/{handle}"
    return None


# ============================================================================
# Skills
# ============================================================================

def _match_vocabulary(text: str, vocabulary: List[str]) -> List[str]:
    lowered = (text or "").lower()
    found = []
    for keyword in vocabulary:
        if keyword.lower() in lowered and keyword not in found:
            found.append(keyword)
    return found


def extract_skills(text: str) -> List[str]:
    """Technical skills from the fixed vocabulary, in vocabulary order."""
    return _match_vocabulary(text, SKILL_KEYWORDS)


def extract_soft_skills(text: str) -> List[str]:
    return _match_vocabulary(text, SOFT_SKILL_KEYWORDS)


# ============================================================================
# Education
# ============================================================================

def _has_keyword(text: str, keywords) -> bool:
    lowered = text.lower()
    return any(keyword in lowered for keyword in keywords)


def _is_degree_line(line: str) -> bool:
    return _has_keyword(line, [k for k in EDUCATION_KEYWORDS if k not in INSTITUTION_KEYWORDS])


def _is_institution_line(line: str) -> bool:
    return _has_keyword(line, INSTITUTION_KEYWORDS)


def _split_degree_line(line: str):
    """Return (degree, institution) found on one line, institution may be None."""
    degree_part = None
    institution_part = None
    other_parts = []
    for part in EDUCATION_PART_SPLIT_RE.split(line):
        part = YEAR_RE.sub("", part).strip(" .:-–")
        if not re.search(r"[A-Za-z]", part) or part.lower().startswith(("gpa", "cgpa", "grade")):
            continue
        if degree_part is None and _is_degree_line(part):
            degree_part = part
        elif institution_part is None and _is_institution_line(part):
            institution_part = part
        else:
            other_parts.append(part)

    institution = institution_part or (other_parts[0] if other_parts else None)
    if degree_part and institution:
        return degree_part, institution
    return line, None


def _graduation_year(lines: List[str], index: int) -> Optional[str]:
    line = lines[index]
    keyword_at = min(
        (line.lower().find(k) for k in EDUCATION_KEYWORDS if k in line.lower()),
        default=0,
    )
    year = _find_year(line[keyword_at:]) or _find_year(line[:keyword_at])
    if year:
        return year
    for following in lines[index + 1:index + 3]:
        year = _find_year(following)
        if year:
            return year
    return None


def _institution_name(line: str) -> str:
    for part in EDUCATION_PART_SPLIT_RE.split(line):
        part = YEAR_RE.sub("", part).strip(" .:-–")
        if _is_institution_line(part):
            return part
    return YEAR_RE.sub("", line).strip(" ,.:-–")


def _neighbour_institution(lines: List[str], index: int, used: set) -> str:
    """Institution for a degree line that names none itself."""
    prev_i, next_i = index - 1, index + 1
    has_prev = (
        prev_i >= 0 and prev_i not in used
        and not _is_header(lines[prev_i]) and not _is_degree_line(lines[prev_i])
    )
    has_next = (
        next_i < len(lines)
        and not _is_degree_line(lines[next_i]) and _is_institution_line(lines[next_i])
    )

    if has_prev and _is_institution_line(lines[prev_i]):
        used.add(prev_i)
        return _institution_name(lines[prev_i])
    if has_next:
        used.add(next_i)
        return _institution_name(lines[next_i])
    if has_prev:
        return lines[prev_i]
    return DEFAULT_INSTITUTION


def extract_education(text: str) -> List[EducationEntry]:
    """
    Line scan for education entries.

    A degree line takes its institution from the same line when one is named
    there (e.g. "Bachelor of Science, MIT, 2015"), otherwise from an adjacent
    institution line, preferring the one above. Section headers are never
    taken as institutions. An institution line used this way is not repeated
    as an entry of its own.
    """
    lines = _lines(text)
    entries = []
    used = set()
    for i, line in enumerate(lines):
        if i in used or not _has_keyword(line, EDUCATION_KEYWORDS):
            continue

        if _is_degree_line(line):
            degree, institution = _split_degree_line(line)
            if institution is None:
                institution = _neighbour_institution(lines, i, used)
            entries.append(EducationEntry(
                degree=degree,
                institution=institution,
                graduation_year=_graduation_year(lines, i),
            ))
            continue

        # Institution-only line; the degree line below claims it
        if i + 1 < len(lines) and _is_degree_line(lines[i + 1]) \
                and _split_degree_line(lines[i + 1])[1] is None:
            continue
        entries.append(EducationEntry(
            degree=DEFAULT_DEGREE,
            institution=_institution_name(line),
            graduation_year=_graduation_year(lines, i),
        ))
    return entries


# ============================================================================
# Work experience
# ============================================================================

def _extract_company(line: str) -> Optional[str]:
    match = COMPANY_RE.search(line)
    if not match:
        return None
    company = COMPANY_END_RE.split(match.group(1))[0].strip(" .;:-–")
    return company or None


def _extract_duration(lines: List[str], index: int, lookahead: int = 3) -> Optional[str]:
    for line in lines[index:index + lookahead + 1]:
        match = DURATION_RE.search(line)
        if match:
            return match.group(0)
    return None


def extract_work_experience(text: str) -> List[WorkExperienceEntry]:
    lines = _lines(text)
    entries = []
    for i, line in enumerate(lines):
        if not ROLE_RE.search(line) or _is_header(line):
            continue
        entries.append(WorkExperienceEntry(
            role=line,
            company=_extract_company(line) or DEFAULT_COMPANY,
            duration=_extract_duration(lines, i) or DEFAULT_DURATION,
            description=list(GENERIC_JOB_DESCRIPTION),
        ))
    return entries


# ============================================================================
# Projects and certifications
# ============================================================================

def _split_project_line(line: str):
    for separator in (":", " - ", " – ", " | "):
        if separator in line:
            name, description = line.split(separator, 1)
            if name.strip() and description.strip():
                return name.strip(), description.strip()
    return line, ""


def extract_projects(text: str) -> List[ProjectEntry]:
    """Lines under a Projects header, one project per non-bullet line."""
    projects: List[Dict] = []
    in_section = False
    for line in _lines(text):
        header = line.lower().rstrip(":").strip()
        if header in SECTION_HEADERS:
            in_section = header in PROJECT_HEADERS
            continue
        if not in_section:
            continue

        is_bullet = bool(BULLET_RE.match(line))
        line = BULLET_RE.sub("", line).strip()
        if not line:
            continue
        if is_bullet and projects:
            current = projects[-1]
            current["description"] = " ".join(filter(None, [current["description"], line]))
            continue
        name, description = _split_project_line(line)
        projects.append({"name": name, "description": description})

    return [
        ProjectEntry(
            name=p["name"],
            description=p["description"] or p["name"],
            technologies=extract_skills(f"{p['name']} {p['description']}"),
        )
        for p in projects[:10]
    ]


def extract_certifications(text: str) -> List[str]:
    found = []
    for line in _lines(text):
        if _is_header(line):
            continue
        line = BULLET_RE.sub("", line).strip()
        if _has_keyword(line, ("certified", "certification", "certificate")) and line not in found:
            found.append(line)
    return found

"""
Default values for the canonical (JSON Resume) document.

Provides the starter document used by:
- detector.py (an empty source document becomes the starter)
- resume.py (every parsed resume is layered over the starter)
"""

import copy
from typing import Any, Dict

JRS_FORMAT_TAG = "JRS@1.0"

DEFAULT_LOCATION = {
    "address": "",
    "postalCode": "",
    "city": "",
    "countryCode": "",
    "region": "",
}

DEFAULT_BASICS = {
    "name": "",
    "label": "",
    "email": "",
    "phone": "",
    "website": "",
    "summary": "",
    "location": DEFAULT_LOCATION,
    "profiles": [],
}

# Top-level sections that hold lists of entries
LIST_SECTIONS = [
    "work",
    "volunteer",
    "education",
    "awards",
    "publications",
    "skills",
    "languages",
    "interests",
    "references",
    "projects",
]

# Template entries used when adding a new item to a section
SECTION_ITEM_DEFAULTS = {
    "work": {"name": "", "position": "", "url": "", "startDate": "", "endDate": "", "summary": "", "highlights": []},
    "volunteer": {"organization": "", "position": "", "url": "", "startDate": "", "endDate": "", "summary": "", "highlights": []},
    "education": {"institution": "", "area": "", "studyType": "", "startDate": "", "endDate": "", "score": "", "courses": []},
    "awards": {"title": "", "date": "", "awarder": "", "summary": ""},
    "publications": {"name": "", "publisher": "", "releaseDate": "", "url": "", "summary": ""},
    "skills": {"name": "", "level": "", "keywords": []},
    "languages": {"language": "", "fluency": ""},
    "interests": {"name": "", "keywords": []},
    "references": {"name": "", "reference": ""},
    "projects": {"name": "", "description": "", "highlights": [], "keywords": [], "startDate": "", "endDate": "", "url": ""},
}


def get_starter_resume() -> Dict[str, Any]:
    """
    Get a complete, empty JSON Resume document.

    Returns a fresh deep copy on every call so callers may mutate it freely.

    Returns:
        Dict with basics, every list section, and meta.format set
    """
    starter: Dict[str, Any] = {"basics": copy.deepcopy(DEFAULT_BASICS)}
    for section in LIST_SECTIONS:
        starter[section] = []
    starter["meta"] = {"format": JRS_FORMAT_TAG}
    return starter


def get_section_item(section: str) -> Dict[str, Any]:
    """Get an empty entry for a list section (empty dict for unknown sections)."""
    return copy.deepcopy(SECTION_ITEM_DEFAULTS.get(section, {}))

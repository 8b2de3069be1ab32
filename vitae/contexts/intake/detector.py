"""
Resume Dialect Detection and Normalization

Detects which resume schema a parsed document follows and normalizes it to the
canonical JSON Resume (JRS) dialect.

Dialects are handled by an explicit registry mapping dialect name to a
normalizer function. Documents whose dialect has no registered normalizer are
reported as unknown.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from vitae.contexts.intake.defaults import JRS_FORMAT_TAG, get_starter_resume

UNKNOWN = "unk"

JRS_TAGS = {"jrs", "jsonresume", "json-resume"}
FRESH_KEYS = ("info", "employment", "service", "projects")


@dataclass
class NormalizedSheet:
    """Result of ensure_jrs()."""

    json: Any
    detected_format: str
    was_converted: bool = False


def detect_format(document: Any) -> str:
    """
    Detect the dialect of a parsed resume document.

    An explicit meta.format tag wins; otherwise the identity section decides
    (``basics`` for JRS, FRESH's top-level sections for FRESH).

    Args:
        document: Parsed JSON value

    Returns:
        "jrs", "fresh", the verbatim (lowercased) format tag, or "unk"
    """
    if not isinstance(document, dict):
        return UNKNOWN

    meta = document.get("meta")
    if isinstance(meta, dict) and meta.get("format"):
        tag = str(meta["format"]).strip().lower()
        if tag.startswith("fresh"):
            return "fresh"
        if tag in JRS_TAGS or tag.startswith("jrs@"):
            return "jrs"
        return tag

    if "basics" in document:
        return "jrs"

    if any(key in document for key in FRESH_KEYS):
        return "fresh"

    return UNKNOWN


def _ensure_meta(document: Dict[str, Any], force: bool = False) -> Dict[str, Any]:
    """Set meta.format when a meta block exists (or when forced)."""
    if "meta" not in document and not force:
        return document
    meta = document.setdefault("meta", {})
    if not str(meta.get("format") or "").strip():
        meta["format"] = JRS_FORMAT_TAG
    return document


def _normalize_jrs(document: Dict[str, Any]) -> Dict[str, Any]:
    return _ensure_meta(document)


# FRESH -> JRS conversion


def _history(section: Any) -> List[Dict[str, Any]]:
    if isinstance(section, dict):
        return list(section.get("history") or [])
    if isinstance(section, list):
        return list(section)
    return []


def _pick(entry: Dict[str, Any], mapping: Dict[str, str]) -> Dict[str, Any]:
    """Copy FRESH keys to their JRS names, skipping absent values."""
    return {jrs: entry[fresh] for fresh, jrs in mapping.items() if entry.get(fresh) is not None}


def _convert_fresh(document: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a FRESH resume to JSON Resume.

    Covers the sections that have a direct JRS counterpart; FRESH-only
    sections (reading, speaking, governance, ...) are dropped.
    """
    info = document.get("info") or {}
    contact = document.get("contact") or {}
    location = document.get("location") or {}

    basics = {
        "name": document.get("name", ""),
        "label": info.get("label", ""),
        "email": contact.get("email", ""),
        "phone": contact.get("phone", ""),
        "website": contact.get("website", ""),
        "summary": info.get("brief", ""),
        "location": {
            "address": location.get("address", ""),
            "postalCode": location.get("code", ""),
            "city": location.get("city", ""),
            "countryCode": location.get("country", ""),
            "region": location.get("region", ""),
        },
        "profiles": [
            _pick(s, {"network": "network", "user": "username", "url": "url"})
            for s in document.get("social") or []
        ],
    }
    if info.get("image"):
        basics["image"] = info["image"]

    dated = {"start": "startDate", "end": "endDate", "summary": "summary", "highlights": "highlights", "url": "url"}

    work = [
        _pick(job, {"employer": "name", "position": "position", **dated})
        for job in _history(document.get("employment"))
    ]
    volunteer = [
        _pick(gig, {"organization": "organization", "position": "position", **dated})
        for gig in _history(document.get("service"))
    ]
    education = [
        _pick(
            edu,
            {
                "institution": "institution",
                "area": "area",
                "studyType": "studyType",
                "start": "startDate",
                "end": "endDate",
                "grade": "score",
                "curriculum": "courses",
            },
        )
        for edu in _history(document.get("education"))
    ]

    skills_section = document.get("skills") or {}
    skills = [
        {"name": s.get("name", ""), "level": s.get("level", ""), "keywords": list(s.get("skills") or [])}
        for s in (skills_section.get("sets") or [] if isinstance(skills_section, dict) else [])
    ]

    awards = [
        _pick(a, {"title": "title", "date": "date", "from": "awarder", "summary": "summary"})
        for a in _history(document.get("recognition"))
    ]
    publications = [
        _pick(p, {"title": "name", "publisher": "publisher", "date": "releaseDate", "url": "url", "summary": "summary"})
        for p in _history(document.get("writing"))
    ]
    projects = [
        _pick(
            p,
            {"title": "name", "summary": "description", "highlights": "highlights", "keywords": "keywords", **dated},
        )
        for p in _history(document.get("projects"))
    ]
    languages = [
        _pick(lang, {"language": "language", "level": "fluency"}) for lang in document.get("languages") or []
    ]
    interests = [_pick(i, {"name": "name", "keywords": "keywords"}) for i in document.get("interests") or []]
    references = [
        _pick(r, {"name": "name", "text": "reference"}) for r in _history(document.get("testimonials"))
    ]

    converted = get_starter_resume()
    converted.update(
        {
            "basics": basics,
            "work": work,
            "volunteer": volunteer,
            "education": education,
            "awards": awards,
            "publications": publications,
            "projects": projects,
            "skills": skills,
            "languages": languages,
            "interests": interests,
            "references": references,
        }
    )
    return converted


# Dialect name -> normalizer producing canonical JRS
DIALECT_NORMALIZERS: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    "jrs": _normalize_jrs,
    "fresh": _convert_fresh,
}


def ensure_jrs(document: Any) -> NormalizedSheet:
    """
    Normalize a parsed document to the canonical JSON Resume dialect.

    An empty object is a valid minimal document and becomes the starter resume.

    Args:
        document: Parsed JSON value

    Returns:
        NormalizedSheet; detected_format is "unk" (or an unregistered dialect
        name) when the document could not be normalized
    """
    if not isinstance(document, dict):
        return NormalizedSheet(json=document, detected_format=UNKNOWN)

    detected = detect_format(document)

    if detected == UNKNOWN and not document:
        return NormalizedSheet(json=_ensure_meta(get_starter_resume(), force=True), detected_format="jrs")

    normalizer = DIALECT_NORMALIZERS.get(detected)
    if normalizer is None:
        return NormalizedSheet(json=document, detected_format=detected)

    return NormalizedSheet(
        json=normalizer(document),
        detected_format=detected,
        was_converted=detected != "jrs",
    )

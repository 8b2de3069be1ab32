"""
Canonical Resume Model

A JSON Resume document held as a nested dict, decorated with normalization
(date parsing, sorting, computed aggregates) and a private metadata block.

Normalization runs once per instance. Copies made with dupe() are normalized
independently from the serialized form of the original.
"""

import json
from functools import cmp_to_key
from typing import Any, Dict, List, Optional

from vitae.contexts.intake.defaults import get_section_item, get_starter_resume
from vitae.contexts.intake.logger import _log_debug
from vitae.contexts.intake.merger import deep_merge
from vitae.utils import duration
from vitae.utils.dates import parse_date

# Keys excluded when serializing a resume
STRINGIFY_EXCLUDE_KEYS = {
    "imp",
    "warnings",
    "computed",
    "filt",
    "ctrl",
    "index",
    "safeStartDate",
    "safeEndDate",
    "safeDate",
    "safeReleaseDate",
    "result",
    "isModified",
    "htmlPreview",
    "display_progress_bar",
}

# Collections whose entries carry start/end dates
DATED_RANGE_SECTIONS = ["work", "education", "volunteer", "projects"]

# Collections with a single date field: section -> (source key, normalized key)
DATED_POINT_SECTIONS = {
    "awards": ("date", "safeDate"),
    "publications": ("releaseDate", "safeReleaseDate"),
}


def strip_internal(data: Any) -> Any:
    """Recursively drop internal/computed keys from a resume structure."""
    if isinstance(data, dict):
        return {
            k: strip_internal(v) for k, v in data.items() if k.strip() not in STRINGIFY_EXCLUDE_KEYS
        }
    if isinstance(data, list):
        return [strip_internal(item) for item in data]
    return data


def _by_date_desc(field: str):
    def compare(a: Dict[str, Any], b: Dict[str, Any]) -> int:
        left, right = a.get(field), b.get(field)
        if not left or not right:
            return 0
        if left < right:
            return 1
        if left > right:
            return -1
        return 0

    return cmp_to_key(compare)


class Resume(dict):
    """
    A JSON Resume document.

    Behaves as the underlying dict (so templates can use ``r.basics.name``) and
    keeps loader metadata on ``imp``:
        file: Source path, when loaded from disk
        raw: Original JSON text
        title: Display title (defaults to basics.name)
        processed: Set once normalization has run
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.imp: Dict[str, Any] = {}

    def parse(self, text: str, **opts) -> "Resume":
        """Initialize from a JSON string."""
        self.imp.setdefault("raw", text)
        return self.parse_json(json.loads(text), **opts)

    def parse_json(
        self,
        rep: Dict[str, Any],
        title: Optional[str] = None,
        date: bool = True,
        sort: bool = True,
        compute: bool = True,
    ) -> "Resume":
        """
        Initialize from a parsed JSON Resume document and normalize it.

        Args:
            rep: Raw JSON Resume mapping
            title: Display title override
            date: Parse entry dates into safe* fields
            sort: Sort dated sections newest first
            compute: Compute basics.computed (numYears, keywords)

        Returns:
            self, for chaining
        """
        if self.imp.get("processed"):
            _log_debug(f"Resume '{self.imp.get('title')}' already normalized; skipping")
            return self

        self.update(deep_merge(get_starter_resume(), rep))

        self.imp["title"] = title or self.imp.get("title") or self["basics"].get("name")
        if not self.imp.get("raw"):
            self.imp["raw"] = json.dumps(rep)

        if date:
            self._parse_dates()
        if sort:
            self.sort()
        if compute:
            self["basics"]["computed"] = {
                "numYears": self.duration(),
                "keywords": self.keywords(),
            }

        self.imp["processed"] = True
        return self

    def _parse_dates(self) -> None:
        for section in DATED_RANGE_SECTIONS:
            for item in self.get(section) or []:
                if "startDate" in item:
                    item["safeStartDate"] = parse_date(item["startDate"])
                if "endDate" in item:
                    item["safeEndDate"] = parse_date(item["endDate"])

        for section, (source_key, safe_key) in DATED_POINT_SECTIONS.items():
            for item in self.get(section) or []:
                item[safe_key] = parse_date(item.get(source_key))

    def sort(self) -> "Resume":
        """Sort dated sections by date, newest first."""
        for section in DATED_RANGE_SECTIONS:
            if self.get(section):
                self[section].sort(key=_by_date_desc("safeStartDate"))
        for section, (_, safe_key) in DATED_POINT_SECTIONS.items():
            if self.get(section):
                self[section].sort(key=_by_date_desc(safe_key))
        return self

    def duration(self, unit: str = "years") -> int:
        """Elapsed time spanned by the work history."""
        return duration.run(self, "work", "startDate", "endDate", unit)

    def keywords(self) -> List[str]:
        """Unique skill keywords, in first-seen order."""
        seen: Dict[str, None] = {}
        for skill in self.get("skills") or []:
            for keyword in skill.get("keywords") or []:
                seen.setdefault(keyword, None)
        return list(seen)

    def has_profile(self, network: str) -> bool:
        wanted = network.strip().lower()
        profiles = (self.get("basics") or {}).get("profiles") or []
        return any(str(p.get("network", "")).strip().lower() == wanted for p in profiles)

    def has_skill(self, skill: str) -> bool:
        wanted = skill.strip().lower()
        return any(
            str(keyword).strip().lower() == wanted
            for entry in self.get("skills") or []
            for keyword in entry.get("keywords") or []
        )

    def add(self, section: str) -> Dict[str, Any]:
        """Append an empty entry to a section and return it."""
        entry = get_section_item(section)
        self.setdefault(section, []).append(entry)
        return entry

    def format(self) -> str:
        return "JRS"

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-safe copy without internal or computed fields."""
        return strip_internal(dict(self))

    def stringify(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)

    def dupe(self) -> "Resume":
        """Deep copy, normalized independently of this instance."""
        return Resume().parse(self.stringify())

    @classmethod
    def default(cls) -> "Resume":
        return cls().parse_json(get_starter_resume())

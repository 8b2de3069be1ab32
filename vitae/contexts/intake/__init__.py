"""
Intake Context

Responsibilities:
- Reads resume documents from disk (UTF-8 JSON)
- Detects the source dialect and normalizes to JSON Resume
- Merges several source documents into one
- Owns the canonical Resume model (dates, sorting, computed aggregates)

Owns: Resume loading, dialect normalization, merging
Never: Knows about themes or output formats
"""

from vitae.contexts.intake.detector import detect_format, ensure_jrs
from vitae.contexts.intake.loader import LoadResult, ResumeLoader
from vitae.contexts.intake.merger import deep_merge, merge_sheets
from vitae.contexts.intake.resume import Resume

__all__ = [
    "LoadResult",
    "Resume",
    "ResumeLoader",
    "deep_merge",
    "detect_format",
    "ensure_jrs",
    "merge_sheets",
]

"""Replacer service package."""

from .api import ReplaceResult, replace_files, run_replacement
from .models import ReplaceMode, ReplacementMap, ReplacementPair, TargetFile

__all__ = [
    "ReplaceMode",
    "ReplaceResult",
    "ReplacementMap",
    "ReplacementPair",
    "TargetFile",
    "replace_files",
    "run_replacement",
]

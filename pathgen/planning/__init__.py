"""Response extraction and path planning."""

from .extract import extract_code, extract_json
from .paths import classify_path, normalize_path
from .plan import build_plan, dedupe_paths, filter_plan

__all__ = [
    "build_plan",
    "classify_path",
    "dedupe_paths",
    "extract_code",
    "extract_json",
    "filter_plan",
    "normalize_path",
]

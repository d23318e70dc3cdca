"""Parsing module.

This module contains the resilient extractor for model output and the
field-name normalization table it consults.
"""
from deep_research_agent.parsing.extractor import (
    EXTRACTION_STEPS,
    extract,
    extract_text_field,
    parse_json_safely,
)
from deep_research_agent.parsing.fields import FIELD_ALIASES, normalize_fields

__all__ = [
    "extract",
    "extract_text_field",
    "parse_json_safely",
    "EXTRACTION_STEPS",
    "FIELD_ALIASES",
    "normalize_fields",
]

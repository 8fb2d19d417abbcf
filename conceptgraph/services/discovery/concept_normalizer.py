"""
Concept Normalizer Module

Normalization and validation of concept names shared by every registry.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto

logger = logging.getLogger(__name__)

MAX_CONCEPT_LENGTH = 100


class ValidationErrorKind(Enum):
    """Reason a concept name was rejected."""

    EMPTY_CONCEPT = auto()
    INVALID_CHARACTER = auto()
    TOO_LONG = auto()


@dataclass(frozen=True)
class ConceptValidation:
    """Result of validating a concept name."""

    is_valid: bool
    error: ValidationErrorKind | None = None
    message: str | None = None


def normalize_concept(name: str) -> str:
    """Normalize a concept name for consistent storage (trimmed and lowercased)."""
    return name.strip().lower()


def validate_concept(name: str | None) -> ConceptValidation:
    """
    Validate a concept name.

    Args:
        name: The concept name to validate

    Returns:
        ConceptValidation with is_valid and, on failure, the error kind and message
    """
    if not name or not name.strip():
        return ConceptValidation(
            is_valid=False,
            error=ValidationErrorKind.EMPTY_CONCEPT,
            message="Concept cannot be empty",
        )

    trimmed = name.strip()

    if "," in trimmed:
        return ConceptValidation(
            is_valid=False,
            error=ValidationErrorKind.INVALID_CHARACTER,
            message="Concepts should not contain commas",
        )

    if len(trimmed) > MAX_CONCEPT_LENGTH:
        return ConceptValidation(
            is_valid=False,
            error=ValidationErrorKind.TOO_LONG,
            message=f"Concept name should be under {MAX_CONCEPT_LENGTH} characters",
        )

    return ConceptValidation(is_valid=True)


def parse_concept_list(text: str | None) -> list[str]:
    """
    Parse a comma-separated string into individual concept names.

    Args:
        text: Comma-separated string like "foo, bar, baz"

    Returns:
        List of trimmed, non-empty names
    """
    if not text or not isinstance(text, str):
        return []

    return [part.strip() for part in text.split(",") if part.strip()]

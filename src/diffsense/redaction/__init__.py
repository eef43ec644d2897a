"""Secret redaction — pattern registry, built-in patterns, diff-aware masking."""

from diffsense.redaction.builtin import BUILTIN_PATTERNS
from diffsense.redaction.models import RedactionPattern, RedactionResult
from diffsense.redaction.redactor import REDACTION_MARKER, SecretRedactor, build_redactor

__all__ = [
    "BUILTIN_PATTERNS",
    "REDACTION_MARKER",
    "RedactionPattern",
    "RedactionResult",
    "SecretRedactor",
    "build_redactor",
]

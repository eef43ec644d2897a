"""Change classification — keywords, magnitude, type, scope, breaking changes."""

from diffsense.analysis.classifier import ChangeClassifier, summarize_file_change
from diffsense.analysis.context import ContextBuilder
from diffsense.analysis.keywords import calculate_magnitude, extract_keywords
from diffsense.analysis.models import (
    CommitType,
    ContextAnalysis,
    ContextOptions,
    FileAnalysis,
    Magnitude,
    ScopeDetection,
    TypeDetection,
)

__all__ = [
    "ChangeClassifier",
    "CommitType",
    "ContextAnalysis",
    "ContextBuilder",
    "ContextOptions",
    "FileAnalysis",
    "Magnitude",
    "ScopeDetection",
    "TypeDetection",
    "calculate_magnitude",
    "extract_keywords",
    "summarize_file_change",
]

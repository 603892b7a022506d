"""Quality gate for generated articles."""

from .gate import (
    DEFAULT_SITE_DOMAIN,
    count_external_links,
    count_h2,
    count_internal_links,
    count_words,
    evaluate,
    evaluate_content,
    has_h2,
)
from .models import QualityCheck, QualityReport
from .thresholds import THRESHOLDS, QualityThresholds

__all__ = [
    "DEFAULT_SITE_DOMAIN",
    "QualityCheck",
    "QualityReport",
    "QualityThresholds",
    "THRESHOLDS",
    "count_external_links",
    "count_h2",
    "count_internal_links",
    "count_words",
    "evaluate",
    "evaluate_content",
    "has_h2",
]

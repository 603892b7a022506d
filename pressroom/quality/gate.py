"""Quality gate: decides whether an article is fit to publish.

Every rule is measured from ``content`` and ``faqs``. The cached counts on an
Article are never read here, so the pipeline and a reviewer re-checking the
same snapshot always get the same verdict.
"""

import re
from typing import Dict, List, Sequence

from ..models import FAQ, Article
from .models import QualityCheck, QualityReport
from .thresholds import THRESHOLDS

DEFAULT_SITE_DOMAIN = "geteducated.com"

_TAG = re.compile(r"<[^>]*>")
_ANCHOR_HREF = re.compile(r"""<a\b[^>]*?\bhref\s*=\s*["']([^"']*)["']""", re.IGNORECASE)
_H2 = re.compile(r"<h2\b", re.IGNORECASE)
_HTTP = re.compile(r"^https?://", re.IGNORECASE)


def _hrefs(content: str) -> List[str]:
    return [href.strip() for href in _ANCHOR_HREF.findall(content or "")]


def count_words(content: str) -> int:
    """Count whitespace-separated tokens once tags are removed."""
    return len(_TAG.sub(" ", content or "").split())


def count_internal_links(content: str, site_domain: str = DEFAULT_SITE_DOMAIN) -> int:
    """Count anchors whose target contains the site's domain marker."""
    marker = site_domain.lower()
    return sum(1 for href in _hrefs(content) if marker in href.lower())


def count_external_links(content: str, site_domain: str = DEFAULT_SITE_DOMAIN) -> int:
    """Count http(s) anchors that do not point at the site itself."""
    marker = site_domain.lower()
    return sum(1 for href in _hrefs(content) if _HTTP.match(href) and marker not in href.lower())


def has_h2(content: str) -> bool:
    """True when the body has at least one level-2 heading."""
    return bool(_H2.search(content or ""))


def count_h2(content: str) -> int:
    """Number of level-2 headings in the body."""
    return len(_H2.findall(content or ""))


def evaluate_content(
    content: str,
    faqs: Sequence[FAQ] = (),
    required_internal_links: int = THRESHOLDS.min_internal_links,
    site_domain: str = DEFAULT_SITE_DOMAIN,
) -> QualityReport:
    """
    Run every quality rule against an article body.

    Args:
        content: HTML body
        faqs: FAQ pairs attached to the article
        required_internal_links: Internal link target; 0 when no candidates were offered
        site_domain: Domain marker identifying internal links

    Returns:
        QualityReport with per-rule checks, score and publish verdict
    """
    words = count_words(content)
    internal = count_internal_links(content, site_domain)
    external = count_external_links(content, site_domain)
    structured = has_h2(content)
    faq_count = len(faqs or [])

    checks: Dict[str, QualityCheck] = {
        "word_count": QualityCheck(
            label="Word count",
            passed=words >= THRESHOLDS.min_words,
            current=words,
            target=THRESHOLDS.min_words,
            critical=True,
        ),
        "internal_links": QualityCheck(
            label="Internal links",
            passed=internal >= required_internal_links,
            current=internal,
            target=required_internal_links,
            critical=True,
        ),
        "external_links": QualityCheck(
            label="External links",
            passed=external >= THRESHOLDS.min_external_links,
            current=external,
            target=THRESHOLDS.min_external_links,
            critical=True,
        ),
        "structure": QualityCheck(
            label="H2 headings",
            passed=structured,
            current=structured,
            target=True,
            critical=True,
        ),
        "faqs": QualityCheck(
            label="FAQ coverage",
            passed=faq_count >= THRESHOLDS.min_faqs,
            current=faq_count,
            target=THRESHOLDS.min_faqs,
            critical=False,
        ),
    }

    passed = sum(1 for check in checks.values() if check.passed)
    return QualityReport(
        checks=checks,
        score=round(100 * passed / len(checks)),
        can_publish=all(check.passed for check in checks.values() if check.critical),
    )


def evaluate(article: Article, site_domain: str = DEFAULT_SITE_DOMAIN) -> QualityReport:
    """Evaluate an article snapshot."""
    return evaluate_content(
        article.content,
        article.faqs,
        required_internal_links=article.required_internal_links,
        site_domain=site_domain,
    )

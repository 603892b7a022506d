"""Prompt construction for draft, humanize and title generation.

All builders are pure: the same inputs always produce the same prompt text.
"""

import json
from typing import List

from ..models import ContentType
from .models import DraftPrompt, PromptRequest
from .templates import THRESHOLDS, get_template

MAX_LINK_INVENTORY = 20

DRAFT_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "excerpt": {"type": "string"},
        "content": {"type": "string"},
        "faqs": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "question": {"type": "string"},
                    "answer": {"type": "string"},
                },
                "required": ["question", "answer"],
            },
        },
    },
    "required": ["title", "excerpt", "content", "faqs"],
}

TITLE_SCHEMA = {
    "type": "object",
    "properties": {
        "titles": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "seo_rationale": {"type": "string"},
                },
                "required": ["title"],
            },
        },
    },
    "required": ["titles"],
}

HUMANIZE_CONTENT_START = "ARTICLE TO HUMANIZE:"
HUMANIZE_CONTENT_END = "HUMANIZATION INSTRUCTIONS:"

AUTHORITATIVE_SOURCES = (
    "government agencies (for example the Bureau of Labor Statistics or the Department of Education), "
    "educational institutions, and recognised industry reports or professional associations"
)

FORMULAIC_TRANSITIONS = ("Furthermore", "Moreover", "In conclusion", "It's worth noting", "Additionally")


def _format_structure(request: PromptRequest) -> List[str]:
    template = get_template(request.content_type)
    low, high = template.faq_range
    lines = ["STRUCTURE:", "", "1. INTRODUCTION (2-3 paragraphs, no heading before it)", ""]
    lines.append("2. MAIN SECTIONS (each an <h2> with an id attribute, in this order):")
    for section in template.sections:
        note = template.section_notes.get(section)
        lines.append(f"   - {section}" + (f" ({note})" if note else ""))
    if template.list_items:
        item_low, item_high = template.list_items
        lines.append(f"   The list must contain {item_low}-{item_high} items, each an <h3>.")
    lines.append("")
    lines.append(f"3. FAQs: {low}-{high} practical questions in the \"faqs\" field")
    lines.append("")
    lines.append("FORMATTING:")
    lines.append("- Use clean HTML only: h2, h3, p, ul, ol, li, strong, a")
    lines.append("- Every <h2> carries an id attribute for navigation")
    return lines


def _format_internal_links(request: PromptRequest, inventory, required: int) -> List[str]:
    if not inventory:
        return [
            "INTERNAL LINKING:",
            f"No existing {request.site_name} articles are available to link to.",
            "Do not invent internal links.",
        ]

    lines = [
        f"INTERNAL LINKING REQUIREMENTS (MANDATORY - {required}+ links):",
        f"You MUST include at least {required} internal links to {request.site_name} articles.",
        "Choose ONLY from this list; never link to an internal URL that is not listed:",
        "",
    ]
    for i, target in enumerate(inventory, start=1):
        line = f"{i}. {target.title} - {target.url}"
        if target.excerpt:
            line += f" ({target.excerpt})"
        lines.append(line)
    lines.append("")
    lines.append("Render each internal link as anchor markup inside a relevant paragraph:")
    lines.append(f'<a href="{inventory[0].url}">anchor text</a>')
    return lines


def _format_external_links(required: int) -> List[str]:
    return [
        f"EXTERNAL LINKING REQUIREMENTS (MANDATORY - {required}+ link):",
        f"You MUST include at least {required} external citation to an authoritative source: "
        f"{AUTHORITATIVE_SOURCES}.",
        'Format: <a href="https://..." target="_blank" rel="noopener">source name</a>',
    ]


def _format_output_contract() -> List[str]:
    return [
        "OUTPUT CONTRACT:",
        "Return ONLY a JSON object matching this schema. No prose before or after it, "
        "no markdown, no code fences. Escape quotes inside the HTML.",
        json.dumps(DRAFT_SCHEMA, indent=2),
    ]


def build_draft_prompt(request: PromptRequest) -> DraftPrompt:
    """Build the draft generation request for an article."""
    template = get_template(request.content_type)
    inventory = list(request.link_inventory[:MAX_LINK_INVENTORY])
    relaxed = not inventory
    required_internal = 0 if relaxed else THRESHOLDS.min_internal_links
    required_external = THRESHOLDS.min_external_links
    low, high = template.word_range

    lines = [
        f"You are an expert content writer for {request.site_name}, a trusted guide to online education.",
        "",
        f"Create a {template.label.upper()} about: \"{request.title}\"",
        "",
        f"TARGET AUDIENCE: {request.target_audience or 'Prospective students'}",
        f"KEYWORDS: {', '.join(request.keywords) if request.keywords else request.title}",
    ]
    if request.additional_context:
        lines.append(f"ADDITIONAL CONTEXT: {request.additional_context}")
    lines.append("")
    lines.extend(_format_internal_links(request, inventory, required_internal))
    lines.append("")
    lines.extend(_format_external_links(required_external))
    lines.append("")
    lines.extend(_format_structure(request))
    lines.append("")
    lines.append(f"WORD COUNT: {low}-{high} words (never fewer than {THRESHOLDS.min_words})")
    lines.append(f"TONE: {template.tone}")
    lines.append("")
    lines.extend(_format_output_contract())

    return DraftPrompt(
        prompt="\n".join(lines),
        output_schema=DRAFT_SCHEMA,
        required_internal_links=required_internal,
        required_external_links=required_external,
        internal_links_relaxed=relaxed,
        link_inventory=inventory,
    )


def build_humanize_prompt(content: str, site_name: str = "GetEducated.com") -> str:
    """Build the stylistic rewrite prompt for a validated draft body."""
    banned = ", ".join(f'"{word}"' for word in FORMULAIC_TRANSITIONS)
    return f"""Rewrite this educational article so it reads as if an experienced education journalist wrote it.

{HUMANIZE_CONTENT_START}
{content}

{HUMANIZE_CONTENT_END}

1. SENTENCE VARIETY:
   - Mix short sentences (5-8 words) with longer ones (20-30 words)
   - Vary paragraph lengths

2. CONVERSATIONAL TONE:
   - Use contractions: "don't", "won't", "isn't", "you'll", "it's"
   - Address the reader directly where it fits

3. REMOVE FORMULAIC PATTERNS:
   - Remove these transitions: {banned}
   - Vary how paragraphs start

4. DO NOT CHANGE:
   - Any heading text or heading id attribute
   - Any link: keep every <a> tag, href and anchor text exactly as-is
   - Facts, figures and {site_name}'s helpful voice

This is a style pass only. Return ONLY the rewritten HTML content. No explanations, no code fences."""


def build_title_prompt(
    topic: str,
    content_type: ContentType,
    keywords: List[str],
    target_audience: str = "",
    count: int = 3,
    site_name: str = "GetEducated.com",
) -> str:
    """Build the prompt that asks for candidate titles."""
    template = get_template(content_type)
    return f"""Generate {count} SEO-optimized article titles for this topic.

Topic: {topic}
Audience: {target_audience or 'Prospective students'}
Content Type: {template.label}
Keywords: {', '.join(keywords[:5])}

Requirements:
- 50-70 characters
- Include the primary keyword
- Match the {template.label} format
- Appropriate for {site_name}

Return ONLY a JSON object matching this schema, best title first:
{json.dumps(TITLE_SCHEMA, indent=2)}"""

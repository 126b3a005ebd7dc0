"""
Changelog label normalization.

Feed producers tag entries with free-text labels ("copilot",
"github api integration"); issues should carry one consistent display
form per label, so labels are title-cased with a fixed table of
acronyms and proper nouns.
"""

import re
from types import MappingProxyType
from typing import Mapping

# Only these five references are decoded; anything else stays literal.
HTML_ENTITIES: Mapping[str, str] = MappingProxyType(
    {
        "&amp;": "&",
        "&lt;": "<",
        "&gt;": ">",
        "&quot;": '"',
        "&#39;": "'",
    }
)

SPECIAL_CASE_WORDS: Mapping[str, str] = MappingProxyType(
    {
        "github": "GitHub",
        "api": "API",
        "apis": "APIs",
        "oauth": "OAuth",
        "saml": "SAML",
        "cli": "CLI",
        "ci": "CI",
        "cd": "CD",
        "cicd": "CI/CD",
    }
)

_ENTITY_PATTERN = re.compile("|".join(re.escape(entity) for entity in HTML_ENTITIES))


def decode_html_entities(text: str) -> str:
    """Decode the five standard named references in a single pass."""
    return _ENTITY_PATTERN.sub(lambda match: HTML_ENTITIES[match.group(0)], text)


def _title_case_word(word: str) -> str:
    special = SPECIAL_CASE_WORDS.get(word.lower())
    if special is not None:
        return special
    # Interior capitals are lowered on purpose: "GraphQL" -> "Graphql"
    return word[:1].upper() + word[1:].lower()


def normalize_label_case(label: str) -> str:
    """Normalize a changelog label to title case with known exceptions.

    >>> normalize_label_case("github api integration")
    'GitHub API Integration'
    >>> normalize_label_case("projects &amp; issues")
    'Projects & Issues'
    """
    decoded = decode_html_entities(label)
    return " ".join(_title_case_word(word) for word in decoded.split())

"""
Naming helpers: schema references and synthesized names for hoisted types.
"""

from __future__ import annotations

import re
from typing import Sequence

from .errors import UnsupportedReferenceError

SCHEMA_REF_PREFIX = "#/components/schemas/"

# Regex pattern to split text into words, handling camelCase boundaries
_WORD_PATTERN = re.compile(r"[a-z]+|[A-Z][a-z]*|[0-9]+")


def to_pascal_case(text: str) -> str:
    """Convert snake_case, kebab-case or camelCase text to PascalCase.

    Examples:
        "author" -> "Author"
        "created_at" -> "CreatedAt"
        "BlogPost" -> "BlogPost"
        "x-rate-limit" -> "XRateLimit"
    """
    if not text:
        return ""
    normalized = text.replace("_", " ").replace("-", " ")
    words = _WORD_PATTERN.findall(normalized)
    return "".join(word.capitalize() for word in words if word)


def synthesize_type_name(segments: Sequence[str]) -> str:
    """Build the name of a hoisted type from its nesting path.

    The first segment is the declaring type, the rest are property names or
    the "Item"/"Value" markers for array items and map values:

        ["Blog", "author"] -> "BlogAuthor"
        ["Post", "comments", "Item"] -> "PostCommentsItem"
    """
    return "".join(to_pascal_case(segment) for segment in segments)


def ref_for_type_name(name: str) -> str:
    """Return the $ref path of a registry key, unescaped and case-sensitive."""
    return f"{SCHEMA_REF_PREFIX}{name}"


def is_reference(schema: object) -> bool:
    return isinstance(schema, dict) and "$ref" in schema


def type_name_from_ref(ref: str, location: str = "") -> str:
    """Extract the registry key from a "#/components/schemas/<Name>" reference."""
    if not isinstance(ref, str) or not ref.startswith(SCHEMA_REF_PREFIX):
        raise UnsupportedReferenceError(ref, location)
    name = ref[len(SCHEMA_REF_PREFIX) :]
    if not name or "/" in name:
        raise UnsupportedReferenceError(ref, location)
    return name

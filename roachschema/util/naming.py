"""Identifier casing helpers for generated type names."""

import re

_WORD_SPLIT_RE = re.compile(r"[_\-\s.]+")

# Words rendered fully upper-case by the code generator's naming rules
INITIALISMS = frozenset(
    {"id", "uid", "uuid", "url", "uri", "json", "sql", "http", "ip", "api"}
)


def title_case(name: str) -> str:
    """Convert ``snake_case`` (or dotted/dashed) names to ``TitleCase``.

    Example:
        >>> title_case("user_id")
        'UserID'
        >>> title_case("workday")
        'Workday'
    """
    words = [w for w in _WORD_SPLIT_RE.split(name) if w]
    parts = []
    for word in words:
        if word.lower() in INITIALISMS:
            parts.append(word.upper())
        else:
            parts.append(word[0].upper() + word[1:])
    return "".join(parts)

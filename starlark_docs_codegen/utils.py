"""
Utility functions for the stub generator.
"""

import re

# Upper-case runs not followed by a lowercase letter are acronyms ("JSON" in "JSONData")
_WORD_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|[0-9]+")


def _split_into_words(text: str) -> list[str]:
    """Split text into words, handling camelCase, acronyms and digit runs."""
    return _WORD_PATTERN.findall(text)


def to_snake_case(text: str) -> str:
    """Convert PascalCase, camelCase or separated text to snake_case.

    Examples:
        "PodName" -> "pod_name"
        "JSONData" -> "json_data"
        "userID" -> "user_id"
        "A1B" -> "a_1_b"
        "some string" -> "some_string"

    Args:
        text: The text to convert

    Returns:
        snake_case string
    """
    if not text:
        return ""
    return "_".join(word.lower() for word in _split_into_words(text))

"""
Machine-readable comment tags.

Go API types carry generator directives in their doc comments, one per
line, as ``+key=value`` (e.g. ``+tilt:starlark-gen=true``). These lines
select what gets generated and must never leak into docstrings.
"""

from __future__ import annotations

from ...errors import TagParseError


def extract_comment_tags(marker: str, lines: list[str]) -> dict[str, list[str]]:
    """
    Collect ``<marker>key=value`` tags from comment lines.

    A tag without ``=`` is recorded with an empty value.

    Args:
        marker: Tag prefix, usually "+"
        lines: Comment lines with comment markers already stripped

    Returns:
        Mapping from tag key to every value it was given, in order
    """
    tags: dict[str, list[str]] = {}
    for line in lines:
        line = line.strip()
        if not line or not line.startswith(marker):
            continue
        key, _, value = line[len(marker) :].partition("=")
        tags.setdefault(key, []).append(value)
    return tags


def extract_bool_comment_tag(marker: str, key: str, default: bool, lines: list[str]) -> bool:
    """
    Read a single boolean tag. The first occurrence wins.

    Raises:
        TagParseError: If the tag is present but not "true" or "false"
    """
    values = extract_comment_tags(marker, lines).get(key)
    if not values:
        return default
    if values[0] == "true":
        return True
    if values[0] == "false":
        return False
    raise TagParseError(f"tag value for {key!r} is not boolean: {values[0]!r}")


def filter_comment_tags(lines: list[str], marker: str = "+") -> list[str]:
    """Drop tag lines, keeping only documentation."""
    return [line for line in lines if not line.strip().startswith(marker)]

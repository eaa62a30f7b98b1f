"""
Selection of generation targets.

Loads a Go package and picks the top-level types whose doc comments
enable generation.
"""

from __future__ import annotations

from pathlib import Path

from ...errors import MissingSpecError, TagParseError
from ...logging import get_logger
from ..config import CodeGeneratorConfig
from ..type_ast import GoPackage, GoPackageParser, TypeDescriptor, TypeKind
from .comment_tags import extract_bool_comment_tag

SPEC_FIELD = "Spec"

logger = get_logger("targets")


def load_generation_targets(
    directory: str | Path,
    config: CodeGeneratorConfig | None = None,
) -> list[TypeDescriptor]:
    """
    Load a Go package and select the types tagged for generation.

    Args:
        directory: The Go package directory
        config: Generator configuration (tag marker and name)

    Returns:
        The generation targets, sorted by name

    Raises:
        DiscoveryError: If the package cannot be loaded
        TagParseError: If a generation tag is malformed
    """
    config = config or CodeGeneratorConfig()
    package = GoPackageParser().parse_dir(directory)
    return select_generation_targets(package, config)


def select_generation_targets(package: GoPackage, config: CodeGeneratorConfig) -> list[TypeDescriptor]:
    """Pick the package types with ``<marker><tag_name>=true``, sorted by name."""
    targets = []
    for t in package.types:
        try:
            enabled = extract_bool_comment_tag(config.tag_marker, config.tag_name, False, t.comment_lines)
        except TagParseError as e:
            raise TagParseError(f"parsing tags in {t}: {e}") from e
        if enabled:
            targets.append(t)

    targets.sort(key=lambda t: t.name)
    logger.info("Selected %d generation targets: %s", len(targets), ", ".join(t.name for t in targets))
    return targets


def get_spec_member_type(t: TypeDescriptor) -> TypeDescriptor | None:
    """Type of the ``Spec`` field of a target, or None if it has none."""
    for member in t.members:
        if member.name == SPEC_FIELD:
            if member.type.kind == TypeKind.POINTER:
                return member.type.elem
            return member.type
    return None


def require_spec_member_type(t: TypeDescriptor) -> TypeDescriptor:
    """
    Type of the ``Spec`` field of a target.

    Raises:
        MissingSpecError: If the target has no ``Spec`` field
    """
    spec = get_spec_member_type(t)
    if spec is None:
        raise MissingSpecError(t.name)
    return spec

"""
Base class for stub generation backends.

Defines the interface that all stub backends implement and the shared
docstring helpers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

import jinja2

from ...utils import to_snake_case
from ..analyzer import filter_comment_tags
from ..config import CodeGeneratorConfig
from ..type_ast import TypeDescriptor


@dataclass(frozen=True)
class ArgDoc:
    """One entry of a docstring's Args section."""

    name: str
    doc: str


def escape_docstring(text: str) -> str:
    """Escape text so it can sit inside a triple-quoted docstring."""
    return text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


class StubBackend(ABC):
    """Abstract base class for stub generation backends."""

    # Template directory name
    TEMPLATE_LANG: str = ""

    # Template file extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig):
        """
        Initialize the backend.

        Args:
            config: Stub generation configuration
        """
        self.config = config
        self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
        )
        # Add custom filters
        self.jinja_env.filters["escape_docstring"] = escape_docstring
        self.jinja_env.filters["snake_case"] = to_snake_case

        self.prefix_template = self.jinja_env.get_template(f"prefix.{self.FILE_EXTENSION}.jinja2")
        self.class_template = self.jinja_env.get_template(f"class.{self.FILE_EXTENSION}.jinja2")
        self.function_template = self.jinja_env.get_template(f"function.{self.FILE_EXTENSION}.jinja2")

    @abstractmethod
    def generate(self, targets: list[TypeDescriptor], members: list[TypeDescriptor]) -> str:
        """
        Generate the stub file.

        Args:
            targets: Generation targets, sorted by name
            members: Member types, in collection order

        Returns:
            Complete stub source
        """

    @abstractmethod
    def render_top_level_function(self, target: TypeDescriptor) -> str:
        """Render the constructor function of a generation target."""

    @abstractmethod
    def render_member_class(self, member: TypeDescriptor) -> str:
        """Render the class declaration of a member type."""

    @abstractmethod
    def render_member_function(self, member: TypeDescriptor) -> str:
        """Render the constructor function of a member type."""

    def _doc_lines(self, comment_lines: list[str]) -> list[str]:
        """Documentation lines of a comment, with tag lines and surrounding blank lines dropped."""
        lines = filter_comment_tags(comment_lines, self.config.tag_marker)
        while lines and not lines[0].strip():
            lines.pop(0)
        while lines and not lines[-1].strip():
            lines.pop()
        return lines

    def _field_doc(self, comment_lines: list[str]) -> str:
        doc = "\n".join(self._doc_lines(comment_lines))
        return doc if doc else self.config.missing_doc_placeholder

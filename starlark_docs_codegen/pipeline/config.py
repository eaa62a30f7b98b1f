"""
Configuration for the stub generator pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_TIME_TYPES = [
    "k8s.io/apimachinery/pkg/apis/meta/v1.Time",
    "k8s.io/apimachinery/pkg/apis/meta/v1.MicroTime",
    "time.Time",
]


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        filename: Name of the file written inside the output directory
        stdout_sentinel: Destination value that selects standard output
        validate_before_write: Whether to syntax-check the stubs before writing
        file_mode: Permissions given to the written file
    """

    filename: str = "__init__.py"
    stdout_sentinel: str = "-"
    validate_before_write: bool = True
    file_mode: int = 0o444


@dataclass
class CodeGeneratorConfig:
    """Configuration options for stub generation."""

    # Prefix of machine-readable comment lines ("+tilt:starlark-gen=true")
    tag_marker: str = "+"

    # Boolean tag that selects a top-level type for generation
    tag_name: str = "tilt:starlark-gen"

    # Tool named in the generated banner
    generator_name: str = "starlark_docs_codegen"

    # Add the "AUTOGENERATED ... DO NOT EDIT" banner to the preamble
    add_generation_comment: bool = True

    # Docstring text for fields without comments
    missing_doc_placeholder: str = "Documentation missing"

    # Qualified names ("<package path>.<Name>") of time-valued types, never emitted
    time_types: list[str] = field(default_factory=lambda: list(DEFAULT_TIME_TYPES))

    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "output" and isinstance(v, dict):
                config.output = OutputConfig(
                    filename=v.get("filename", "__init__.py"),
                    stdout_sentinel=v.get("stdout_sentinel", "-"),
                    validate_before_write=v.get("validate_before_write", True),
                    file_mode=_parse_mode(v.get("file_mode", 0o444)),
                )
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "tag_marker": self.tag_marker,
            "tag_name": self.tag_name,
            "generator_name": self.generator_name,
            "add_generation_comment": self.add_generation_comment,
            "missing_doc_placeholder": self.missing_doc_placeholder,
            "time_types": self.time_types,
            "output": {
                "filename": self.output.filename,
                "stdout_sentinel": self.output.stdout_sentinel,
                "validate_before_write": self.output.validate_before_write,
                "file_mode": oct(self.output.file_mode),
            },
        }


def _parse_mode(value: int | str) -> int:
    """Accept permissions either as an int or as an octal string ("0o444", "444")."""
    if isinstance(value, int):
        return value
    return int(value, 8)

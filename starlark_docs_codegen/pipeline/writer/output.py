"""
Destination handling for the generated stub module.

The destination is either the stdout sentinel or a directory that
receives a single file with a fixed name.
"""

from __future__ import annotations

from pathlib import Path

import click

from ..config import OutputConfig
from .atomic_writer import AtomicWriter, check_python_syntax


def resolve_output_path(destination: str | Path, config: OutputConfig) -> Path | None:
    """
    Resolve where the stubs go.

    Args:
        destination: Output directory, or the stdout sentinel
        config: Output configuration

    Returns:
        Path of the file to write, or None for standard output
    """
    if str(destination) == config.stdout_sentinel:
        return None
    return Path(destination) / config.filename


def write_output(content: str, destination: str | Path, config: OutputConfig) -> Path | None:
    """
    Write the fully generated stubs to their destination.

    Args:
        content: Complete stub module
        destination: Output directory, or the stdout sentinel
        config: Output configuration

    Returns:
        The written file, or None when printed to standard output

    Raises:
        OutputError: If the file cannot be written or the content is invalid
    """
    path = resolve_output_path(destination, config)
    if path is None:
        if config.validate_before_write:
            check_python_syntax(content)
        click.echo(content, nl=False)
        return None

    writer = AtomicWriter(file_mode=config.file_mode)
    writer.write(path, content, validate=config.validate_before_write)
    return path

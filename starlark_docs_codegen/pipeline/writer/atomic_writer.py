"""
Atomic file writer for generated stubs.

Ensures that an interrupted or failed write never leaves a partial stub
file behind.
"""

from __future__ import annotations

import ast
import os
import tempfile
from collections.abc import Callable
from pathlib import Path

from ...errors import OutputError
from ...logging import get_logger

logger = get_logger("writer")


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        file_mode: int = 0o444,
        validate_python: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            file_mode: Permissions given to the written file
            validate_python: Optional validation function for the generated code
        """
        self.file_mode = file_mode
        self._validate_python = validate_python or check_python_syntax

    def write(self, path: Path, content: str, validate: bool = True) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If validation or any file operation fails
        """
        if validate:
            self._validate_python(content)

        if not path.parent.is_dir():
            raise OutputError(f"output directory does not exist: {path.parent}")

        # Same directory ensures atomic rename on the same filesystem
        try:
            temp_fd, temp_path_str = tempfile.mkstemp(
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                text=True,
            )
        except OSError as e:
            raise OutputError(f"creating {path}: {e}") from e

        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.chmod(temp_path, self.file_mode)
            temp_path.replace(path)
        except OSError as e:
            self._cleanup(temp_path)
            raise OutputError(f"writing {path}: {e}") from e
        except BaseException:
            self._cleanup(temp_path)
            raise

        logger.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))

    @staticmethod
    def _cleanup(temp_path: Path) -> None:
        if temp_path.exists():
            try:
                temp_path.unlink()
            except OSError:
                logger.warning("Could not remove temporary file %s", temp_path)


def check_python_syntax(content: str) -> None:
    """Check that generated stubs parse as Python.

    Args:
        content: Python code to validate

    Raises:
        OutputError: If the code does not parse
    """
    try:
        ast.parse(content)
    except SyntaxError as e:
        raise OutputError(f"Generated stubs are not valid Python: {e}") from e

"""
Pipeline generator - runs all phases in order.

1. Load the Go package and select the tagged generation targets
2. Collect member types reachable from the targets' Spec fields
3. Render every stub into one in-memory buffer
4. Write the buffer to its destination
"""

from __future__ import annotations

from pathlib import Path

from ..logging import get_logger
from .analyzer import collect_members, load_generation_targets
from .backends import StarlarkBackend
from .config import CodeGeneratorConfig
from .type_ast import TypeDescriptor
from .writer import write_output

logger = get_logger("generator")


class PipelineGenerator:
    """Generates the Starlark stub module for one Go package."""

    def __init__(self, source_dir: str | Path, config: CodeGeneratorConfig | None = None):
        """
        Initialize the generator.

        Args:
            source_dir: Directory of the Go package holding the API types
            config: Generator configuration
        """
        self.source_dir = Path(source_dir)
        self.config = config or CodeGeneratorConfig()
        self.backend = StarlarkBackend(self.config)

        self.targets: list[TypeDescriptor] = []
        self.members: list[TypeDescriptor] = []

    def load(self) -> list[TypeDescriptor]:
        """Parse the package and select the generation targets."""
        logger.debug("Loading Go package from %s", self.source_dir)
        self.targets = load_generation_targets(self.source_dir, self.config)
        return self.targets

    def generate(self) -> str:
        """
        Generate the complete stub module.

        Returns:
            The stub source; nothing has been written yet

        Raises:
            CodegenError: On any loading, tag, Spec or field-shape error
        """
        self.load()
        self.members = collect_members(self.targets, self.config.time_types)
        return self.backend.generate(self.targets, self.members)

    def write(self, destination: str | Path) -> Path | None:
        """
        Generate the stubs and write them to the destination.

        Args:
            destination: Output directory, or the stdout sentinel

        Returns:
            The written file, or None when printed to standard output
        """
        content = self.generate()
        return write_output(content, destination, self.config.output)

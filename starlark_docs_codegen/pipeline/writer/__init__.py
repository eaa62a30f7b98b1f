"""
Writer - atomic output of the generated stub module.
"""

from .atomic_writer import AtomicWriter, check_python_syntax
from .output import resolve_output_path, write_output

__all__ = ["AtomicWriter", "check_python_syntax", "resolve_output_path", "write_output"]

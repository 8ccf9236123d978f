"""TypeScript code generation."""

from convexgen.generate.api import APIGenerator
from convexgen.generate.hooks import HooksGenerator
from convexgen.generate.output import prepare_output_dir, write_index
from convexgen.generate.types import TypesGenerator

__all__ = [
    "APIGenerator",
    "HooksGenerator",
    "TypesGenerator",
    "prepare_output_dir",
    "write_index",
]

"""Livebook notebook handling for"""

from notebook.analysis import render_analysis
from notebook.extractor import (
    FORCE_MARKDOWN_DIRECTIVE,
    BlockState,
    extract_executable_code,
    extract_notebook_code,
)

__all__ = [
    "FORCE_MARKDOWN_DIRECTIVE",
    "BlockState",
    "extract_executable_code",
    "extract_notebook_code",
    "render_analysis",
]

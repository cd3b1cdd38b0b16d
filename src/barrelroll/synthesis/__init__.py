"""Synthesis stage: turn per-file export inventories into barrel content."""

from barrelroll.synthesis.builder import build_content
from barrelroll.synthesis.sanitizer import merge_preserved, preserve_definitions

__all__ = ["build_content", "merge_preserved", "preserve_definitions"]

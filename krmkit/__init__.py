"""Helpers for KRM objects: YAML-preserving edits, references, NAD configs, NF deployment state and templates."""

__version__ = "0.1.0"
__all__ = ["__version__"]
"""Structured hexahedral mesh analysis, unfolding and remapping onto bent meshes."""

__version__ = "1.0.0"
"""
Core numeric type, math helpers and text formatting.

This package is independent of the notation classes built on top of it.
"""

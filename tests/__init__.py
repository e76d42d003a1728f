"""
Test suite for eternal-notations

Contains:
- tests/unit/          : Unit tests for core.math, core.formatting and each notation
"""

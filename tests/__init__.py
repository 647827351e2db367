"""
Test suite for proximity-marketplace-core

Contains:
- tests/unit/          : Unit tests for individual modules
"""

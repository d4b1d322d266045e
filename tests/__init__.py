"""
Test suite for pooled-vault

Contains:
- tests/unit/          : Unit tests for individual modules and vault scenarios
"""

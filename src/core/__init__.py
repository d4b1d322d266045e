"""
Core domain models, integer math primitives, and data contracts.

This module contains the foundational building blocks that are independent
of external systems (asset tokens, venue adapters, indexers).
"""

"""
Core domain models, mathematical primitives, and contracts.

Building blocks independent of external systems (location sensor,
payment processor, escrow backend).
"""

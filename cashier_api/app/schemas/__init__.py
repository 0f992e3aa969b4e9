"""
Pydantic schema definitions for API payloads.

Products and transactions are stored as opaque JSON inside datasets,
so their schemas only name the fields the business rules read and
allow any other field through unchanged.
"""

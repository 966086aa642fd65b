"""
Core utilities shared across the accounts API.

This package hosts:
- configuration helpers (env vars, token lifetimes, hashing cost)
- the error taxonomy surfaced to API callers
- credential hashing and reset-token issuing
- cross-cutting services such as the mailer and the rate limit helper
"""

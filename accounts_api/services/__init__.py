"""
High-level use cases for the accounts API.

Service modules orchestrate repositories/adapters to implement business rules
(register, log in, reset a password, delete an account). Routers call these
services instead of touching the database or tokens directly.
"""

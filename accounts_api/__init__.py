"""User account service: registration, login, password reset and profile management."""

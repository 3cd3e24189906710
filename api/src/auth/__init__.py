"""Authentication: roles, password hashing, tokens and request dependencies."""

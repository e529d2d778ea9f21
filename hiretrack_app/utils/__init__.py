"""
Shared helpers: auth, constants, errors.
"""

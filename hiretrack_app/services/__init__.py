"""
Service layer. Every write takes the caller's SessionContext as its first argument.
"""

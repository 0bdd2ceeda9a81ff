"""
Domain Layer

Pagination values, cache keys and the ports the inbox depends on.
"""

"""
Core utilities: domain exceptions and cross-cutting concerns.
"""

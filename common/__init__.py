"""
Shared geometry, imaging helpers, constants and errors.
"""

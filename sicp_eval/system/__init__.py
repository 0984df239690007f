"""
Shared error types and configuration models.
"""

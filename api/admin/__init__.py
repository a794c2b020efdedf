"""
Admin-only endpoints.
"""

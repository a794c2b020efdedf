"""
Per-user saved tracks.
"""

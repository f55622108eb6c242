"""
entkit Test Suite.

This package contains:
- unit/: Unit tests (temporary SQLite files, no services)
"""

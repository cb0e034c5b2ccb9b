# tests/unit/__init__.py
"""
Unit tests for Workboard.

Pure rule and error-taxonomy tests; no storage involved.
"""

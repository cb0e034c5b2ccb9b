"""
Workboard - ticket, epic and board consistency engine.
"""

__version__ = "0.1.0"

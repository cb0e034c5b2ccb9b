"""
Core layer: domain model, business rules and ports.
"""

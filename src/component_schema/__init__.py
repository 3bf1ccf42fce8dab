"""
Component schema lifecycle management.

Optional components own database tables that are created, dropped and
drift-checked at runtime; one-shot startup migrations are applied in
version order exactly once.
"""

__version__ = "0.1.0"

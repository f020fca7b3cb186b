"""CineVault - movie catalog API.

Token-authenticated CRUD over movies with content-addressed storage for
uploaded movie files.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

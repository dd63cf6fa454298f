"""Expose the application factory at package level.

``from tokenauth import create_app`` is the entry point used by the WSGI module,
the Flask CLI and the test-suite.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]

"""Helpers shared by every service: errors, base class and ports."""

"""
Security helpers for rendered grid content.
"""

from .sanitizer import HtmlSanitizer, get_sanitizer

__all__ = ["HtmlSanitizer", "get_sanitizer"]

"""
HTML sanitization for ``safe_html`` cells.

Sanitization runs in a fixed order:
1. remove ``<script>`` blocks and ``on*`` event handler attributes
2. rewrite ``javascript:`` and ``data:`` URLs in ``href``/``src`` to a placeholder
3. strip tags outside the allowlist
4. strip attributes outside the per-tag allowlist

Steps 3 and 4 are delegated to bleach. The sanitizer never raises: on an
unexpected failure it falls back to escaped plain text.
"""

import html
import logging
import re
from typing import Dict, Iterable, List, Optional

import bleach
from bleach.css_sanitizer import CSSSanitizer
from django.utils.html import strip_tags

from ..settings import GridSettings

logger = logging.getLogger(__name__)

SCRIPT_BLOCK_PATTERN = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
SCRIPT_TAG_PATTERN = re.compile(r"</?script\b[^>]*>", re.IGNORECASE)
TAG_PATTERN = re.compile(r"<[a-zA-Z][^>]*>")
EVENT_HANDLER_PATTERN = re.compile(
    r"\s+on[a-z]+\s*=\s*(?:\"[^\"]*\"|'[^']*'|[^\s>]+)", re.IGNORECASE
)
UNSAFE_URL_PATTERN = re.compile(
    r"(?P<attr>\b(?:href|src))\s*=\s*"
    r"(?:\"\s*(?:javascript|data|vbscript)\s*:[^\"]*\""
    r"|'\s*(?:javascript|data|vbscript)\s*:[^']*'"
    r"|(?:javascript|data|vbscript):[^\s>]*)",
    re.IGNORECASE,
)


class HtmlSanitizer:
    """
    Allowlist HTML sanitizer.

    Example:
        sanitizer = HtmlSanitizer()
        sanitizer.sanitize('<p onclick="x()">Hi<script>alert(1)</script></p>')
        # '<p>Hi</p>'
    """

    def __init__(
        self,
        allowed_tags: Optional[Iterable[str]] = None,
        allowed_attributes: Optional[Dict[str, List[str]]] = None,
        allowed_protocols: Optional[Iterable[str]] = None,
        allowed_css_properties: Optional[Iterable[str]] = None,
        placeholder_url: Optional[str] = None,
    ):
        defaults = GridSettings.from_entity()
        self.allowed_tags = frozenset(allowed_tags or defaults.allowed_tags)
        self.allowed_attributes = dict(allowed_attributes or defaults.allowed_attributes)
        self.allowed_protocols = frozenset(allowed_protocols or defaults.allowed_protocols)
        self.placeholder_url = placeholder_url or defaults.unsafe_url_placeholder
        self.css_sanitizer = CSSSanitizer(
            allowed_css_properties=list(
                allowed_css_properties or defaults.allowed_css_properties
            )
        )

    def sanitize(self, value) -> str:
        if value is None:
            return ""
        text = str(value)
        if not text:
            return ""
        try:
            text = self._remove_scripts(text)
            text = self._neutralize_urls(text)
            text = bleach.clean(
                text,
                tags=self.allowed_tags,
                attributes=self.allowed_attributes,
                protocols=self.allowed_protocols,
                css_sanitizer=self.css_sanitizer,
                strip=True,
                strip_comments=True,
            )
            return text.strip()
        except Exception:
            logger.exception("HTML sanitization failed, falling back to plain text")
            return html.escape(strip_tags(text)).strip()

    def is_safe(self, value) -> bool:
        """Return True when sanitizing ``value`` would not change it."""
        if value is None:
            return True
        return self.sanitize(value) == str(value)

    def _remove_scripts(self, text: str) -> str:
        text = SCRIPT_BLOCK_PATTERN.sub("", text)
        text = SCRIPT_TAG_PATTERN.sub("", text)
        return TAG_PATTERN.sub(lambda m: EVENT_HANDLER_PATTERN.sub("", m.group(0)), text)

    def _neutralize_urls(self, text: str) -> str:
        placeholder = self.placeholder_url

        def _replace(match: re.Match) -> str:
            return f'{match.group("attr")}="{placeholder}"'

        return TAG_PATTERN.sub(lambda m: UNSAFE_URL_PATTERN.sub(_replace, m.group(0)), text)


_default_sanitizer: Optional[HtmlSanitizer] = None


def get_sanitizer() -> HtmlSanitizer:
    """Return the process-wide sanitizer built from settings."""
    global _default_sanitizer
    if _default_sanitizer is None:
        _default_sanitizer = HtmlSanitizer()
    return _default_sanitizer


def reset_sanitizer() -> None:
    global _default_sanitizer
    _default_sanitizer = None

"""Sanitizer for activity content shown inline in the side bar list."""

from __future__ import annotations

from html import escape
from html.parser import HTMLParser
from typing import Iterable
from urllib.parse import urlsplit

# Inline content only; the side bar column is too narrow for media embeds.
ALLOWED_TAGS: Iterable[str] = {
    'a', 'abbr', 'b', 'br', 'code', 'div', 'em', 'i', 'img', 'li', 'ol', 'p',
    'small', 'span', 'strong', 'sub', 'sup', 'u', 'ul',
}

VOID_TAGS = {'br', 'img'}

ALLOWED_ATTRIBUTES = {
    'a': {'href', 'title', 'target', 'rel', 'class'},
    'div': {'class'},
    'img': {'alt', 'src', 'title', 'width', 'height', 'class'},
    'li': {'class'},
    'ol': {'class'},
    'p': {'class'},
    'span': {'class'},
}

URL_ATTRIBUTES = {'href', 'src'}
ALLOWED_PROTOCOLS = {'http', 'https', 'mailto'}


def _is_safe_url(value: str) -> bool:
    value = value.strip()
    if not value:
        return False
    if value.startswith(('#', '/')):
        return True
    parts = urlsplit(value)
    if not parts.scheme:
        return True
    return parts.scheme.lower() in ALLOWED_PROTOCOLS


class _ContentSanitizer(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._output: list[str] = []
        self._open_tags: list[str] = []
        # Depth inside <script>/<style>, whose text is dropped entirely
        self._skip_depth = 0

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in ('script', 'style'):
            self._skip_depth += 1
            return
        if tag not in ALLOWED_TAGS:
            return

        allowed_attrs = ALLOWED_ATTRIBUTES.get(tag, set())
        cleaned_attrs: list[str] = []
        for attr_name, attr_value in attrs:
            if attr_name not in allowed_attrs or attr_value is None:
                continue

            attr_value = attr_value.strip()
            if attr_name in URL_ATTRIBUTES and not _is_safe_url(attr_value):
                continue

            cleaned_attrs.append(f'{attr_name}="{escape(attr_value, quote=True)}"')

        attr_string = ''
        if cleaned_attrs:
            attr_string = ' ' + ' '.join(cleaned_attrs)

        if tag in VOID_TAGS:
            self._output.append(f'<{tag}{attr_string} />')
            return

        self._output.append(f'<{tag}{attr_string}>')
        self._open_tags.append(tag)

    def handle_endtag(self, tag: str) -> None:
        if tag in ('script', 'style'):
            self._skip_depth = max(0, self._skip_depth - 1)
            return
        if tag not in ALLOWED_TAGS or tag in VOID_TAGS:
            return
        for index in range(len(self._open_tags) - 1, -1, -1):
            if self._open_tags[index] == tag:
                del self._open_tags[index]
                self._output.append(f'</{tag}>')
                break

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag in ('script', 'style'):
            return
        self.handle_starttag(tag, attrs)
        if tag not in VOID_TAGS and tag in ALLOWED_TAGS:
            self.handle_endtag(tag)

    def handle_data(self, data: str) -> None:
        if self._skip_depth:
            return
        self._output.append(escape(data))

    def handle_entityref(self, name: str) -> None:
        if self._skip_depth:
            return
        self._output.append(f'&{name};')

    def handle_charref(self, name: str) -> None:
        if self._skip_depth:
            return
        self._output.append(f'&#{name};')

    def get_html(self) -> str:
        # Close anything the author left open so the list item stays well formed
        closing = ''.join(f'</{tag}>' for tag in reversed(self._open_tags))
        return ''.join(self._output) + closing


def sanitize_activity_content(raw_html: str | None) -> str:
    """Sanitize activity content (labels, descriptions) before rendering."""

    if not raw_html:
        return ''

    parser = _ContentSanitizer()
    parser.feed(raw_html)
    parser.close()
    return parser.get_html()

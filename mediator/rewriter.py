"""HLS manifest rewriting.

Every URI in a manifest is resolved against the manifest's own URL and
replaced with a URL pointing back at the proxy, so the player fetches
variants, segments, keys and init sections through the relay as well.
"""
from __future__ import annotations

import logging
import re
from urllib.parse import quote, urljoin, urlsplit

logger = logging.getLogger(__name__)

DIRECTIVE_MARKER = "#"
URI_DIRECTIVES = ("#EXT-X-KEY", "#EXT-X-MAP")
URI_ATTRIBUTE = re.compile(r'URI="([^"]+)"')


def resolve_reference(base: str, reference: str) -> str:
    """Resolve ``reference`` against ``base``; absolute references come back unchanged.

    Raises ValueError when the result is not an absolute http(s) URL.
    """

    absolute = urljoin(base, reference)
    parts = urlsplit(absolute)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"cannot resolve {reference!r} to an http(s) URL")
    return absolute


def proxy_url(proxy_base: str, target: str) -> str:
    return f"{proxy_base}?url={quote(target, safe='')}"


def _rewrite_directive(line: str, source_url: str, proxy_base: str) -> str:
    def repl(match: re.Match) -> str:
        try:
            absolute = resolve_reference(source_url, match.group(1))
        except ValueError:
            logger.debug("Keeping unresolvable directive URI %r", match.group(1))
            return match.group(0)
        return f'URI="{proxy_url(proxy_base, absolute)}"'

    return URI_ATTRIBUTE.sub(repl, line, count=1)


def rewrite_line(line: str, source_url: str, proxy_base: str) -> str:
    """Rewrite one manifest line (without its line separator)."""

    stripped = line.strip()
    if not stripped:
        return line

    if stripped.startswith(DIRECTIVE_MARKER):
        if stripped.startswith(URI_DIRECTIVES):
            return _rewrite_directive(line, source_url, proxy_base)
        return line

    try:
        absolute = resolve_reference(source_url, stripped)
    except ValueError:
        logger.debug("Keeping unresolvable reference %r", stripped)
        return line
    return proxy_url(proxy_base, absolute)


def rewrite_manifest(text: str, source_url: str, proxy_base: str) -> str:
    """Return ``text`` with every URI routed through ``proxy_base``.

    Lines keep their order and count; CRLF separators are preserved.
    """

    rewritten = []
    for raw in text.split("\n"):
        body, eol = (raw[:-1], "\r") if raw.endswith("\r") else (raw, "")
        rewritten.append(rewrite_line(body, source_url, proxy_base) + eol)
    return "\n".join(rewritten)

"""
Wire Engine — HTML helpers

  update_html  — stamp attributes onto a fragment's root element
  html_hash    — content fingerprint of rendered markup (change detection only)

The fragment walker keeps the root element's inner markup byte-for-byte
(tags, entities, comments, script bodies) and only rebuilds the root start
tag. Anything outside the root element is dropped.
"""

from __future__ import annotations

import logging
import zlib
from dataclasses import dataclass, field
from html import escape
from html.parser import HTMLParser

from engine.wire.errors import RenderError

logger = logging.getLogger(__name__)

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def html_hash(markup: str) -> str:
    """CRC-32 (IEEE) of the UTF-8 bytes as 8 lowercase hex digits. Not for security."""
    return f"{zlib.crc32(markup.encode('utf-8')) & 0xFFFFFFFF:08x}"


def update_html(
    markup: str,
    attrs: dict[str, str],
    footer: str,
    *,
    strict: bool = False,
) -> str:
    """
    Set attributes on the root element of `markup` and append `footer`.

    Existing attributes with the same name are overwritten in place; new ones
    are appended in the order given. The footer goes on its own line.

    Raises RenderError when the markup has no root element, or, with
    strict=True, more than one top-level element.
    """
    fragment = parse_fragment(markup)

    if fragment.tag is None:
        raise RenderError("html has no root element", context={"html": markup})

    if fragment.top_level_elements > 1:
        if strict:
            raise RenderError(
                "html has more than one root element",
                context={"html": markup, "roots": fragment.top_level_elements},
            )
        logger.warning(
            "wire.html: %d top-level elements, stamping <%s> only",
            fragment.top_level_elements,
            fragment.tag,
        )

    merged: dict[str, str | None] = {}
    for name, value in fragment.attrs:
        # First occurrence wins, as in the browser.
        if name not in merged:
            merged[name] = value
    for name, value in attrs.items():
        merged[name] = value

    out = _start_tag(fragment.tag, merged)
    if fragment.tag not in VOID_ELEMENTS:
        out += fragment.inner + f"</{fragment.tag}>"

    return f"{out}\n{footer}\n"


@dataclass
class Fragment:
    """Result of walking a markup fragment."""

    tag: str | None = None
    attrs: list[tuple[str, str | None]] = field(default_factory=list)
    inner: str = ""
    top_level_elements: int = 0


def parse_fragment(markup: str) -> Fragment:
    """Locate the first top-level element of `markup`. Raises RenderError if unparseable."""
    walker = _FragmentWalker()
    try:
        walker.feed(markup)
        walker.close()
    except (AssertionError, ValueError) as e:
        raise RenderError("failed to parse html", cause=e, context={"html": markup}) from e
    return walker.fragment()


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _start_tag(tag: str, attrs: dict[str, str | None]) -> str:
    parts = [f"<{tag}"]
    for name, value in attrs.items():
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(value, quote=True)}"')
    parts.append(">")
    return "".join(parts)


class _FragmentWalker(HTMLParser):
    """
    Streams the fragment once. Before the root: everything is skipped.
    Inside the root: raw text is collected. After the root: only top-level
    start tags are counted.
    """

    def __init__(self) -> None:
        super().__init__(convert_charrefs=False)
        self._tag: str | None = None
        self._attrs: list[tuple[str, str | None]] = []
        self._inner: list[str] = []
        self._stack: list[str] = []  # open elements inside the root
        self._outside: list[str] = []  # open elements after the root
        self._in_root = False
        self._top_level = 0

    def fragment(self) -> Fragment:
        return Fragment(
            tag=self._tag,
            attrs=self._attrs,
            inner="".join(self._inner),
            top_level_elements=self._top_level,
        )

    # -- tags --

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self.get_starttag_text() or f"<{tag}>", self_closing=False)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._open(tag, attrs, self.get_starttag_text() or f"<{tag}/>", self_closing=True)

    def handle_endtag(self, tag: str) -> None:
        if self._in_root:
            if tag not in self._stack:
                # Stray end tag inside the root; keep it as written.
                self._inner.append(f"</{tag}>")
                return
            while self._stack:
                open_tag = self._stack.pop()
                if open_tag == tag:
                    break
            if not self._stack:
                self._in_root = False
            else:
                self._inner.append(f"</{tag}>")
            return

        if tag in self._outside:
            while self._outside and self._outside.pop() != tag:
                pass

    def _open(self, tag: str, attrs: list[tuple[str, str | None]], raw: str, self_closing: bool) -> None:
        if self._in_root:
            self._inner.append(raw)
            if not self_closing and tag not in VOID_ELEMENTS:
                self._stack.append(tag)
            return

        if self._tag is None:
            self._tag = tag
            self._attrs = attrs
            self._top_level = 1
            if not self_closing and tag not in VOID_ELEMENTS:
                self._stack.append(tag)
                self._in_root = True
            return

        if not self._outside:
            self._top_level += 1
        if not self_closing and tag not in VOID_ELEMENTS:
            self._outside.append(tag)

    # -- content --

    def handle_data(self, data: str) -> None:
        if self._in_root:
            self._inner.append(data)

    def handle_entityref(self, name: str) -> None:
        if self._in_root:
            self._inner.append(f"&{name};")

    def handle_charref(self, name: str) -> None:
        if self._in_root:
            self._inner.append(f"&#{name};")

    def handle_comment(self, data: str) -> None:
        if self._in_root:
            self._inner.append(f"<!--{data}-->")

    def handle_decl(self, decl: str) -> None:
        if self._in_root:
            self._inner.append(f"<!{decl}>")

    def handle_pi(self, data: str) -> None:
        if self._in_root:
            self._inner.append(f"<?{data}>")

    def unknown_decl(self, data: str) -> None:
        if self._in_root:
            self._inner.append(f"<![{data}]>")

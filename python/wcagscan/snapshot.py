# SPDX-License-Identifier: AGPL-3.0-only
"""Page snapshot capability set.

Analyzers only ever see the ``Snapshot`` / ``ElementHandle`` protocols. A
browser-backed provider lives outside this package; ``HtmlSnapshot`` is the
in-memory implementation used for offline scans and tests. It parses HTML with
BeautifulSoup, resolves selectors with soupsieve and computes a simplified
cascade (source order, no specificity, no inheritance) from the stylesheets it
was given plus any ``<style>`` blocks in the document.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Protocol, runtime_checkable

import soupsieve
from bs4 import BeautifulSoup, NavigableString, Tag


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class CssRule:
    selector: str
    declarations: tuple[tuple[str, str], ...]
    media: str | None = None

    def get(self, prop: str) -> str | None:
        value = None
        for name, v in self.declarations:
            if name == prop:
                value = v
        return value

    @property
    def css_text(self) -> str:
        body = "; ".join(f"{k}: {v}" for k, v in self.declarations)
        rule = f"{self.selector} {{ {body} }}"
        return f"@media {self.media} {{ {rule} }}" if self.media else rule


@dataclass(frozen=True)
class StylesheetAccess:
    """One stylesheet as seen by the page; cross-origin sheets come back denied."""

    href: str | None
    rules: tuple[CssRule, ...] = ()
    denied: bool = False
    reason: str = ""

    @classmethod
    def from_css(cls, css_text: str, href: str | None = None) -> "StylesheetAccess":
        return cls(href=href, rules=tuple(parse_css(css_text)))

    @classmethod
    def access_denied(cls, href: str | None, reason: str = "cross-origin") -> "StylesheetAccess":
        return cls(href=href, rules=(), denied=True, reason=reason)


@runtime_checkable
class ElementHandle(Protocol):
    tag: str
    index: int

    @property
    def attrs(self) -> Mapping[str, str]: ...

    def attr(self, name: str) -> str | None: ...

    def text(self, *, collapse: bool = True) -> str: ...

    def outer_html(self, limit: int | None = None) -> str: ...

    def style(self, prop: str, pseudo: str | None = None) -> str: ...

    def parent(self) -> "ElementHandle | None": ...

    def children(self) -> list["ElementHandle"]: ...

    def previous_sibling(self) -> "ElementHandle | None": ...

    def next_sibling(self) -> "ElementHandle | None": ...

    def closest(self, selector: str) -> "ElementHandle | None": ...

    def query(self, selector: str) -> list["ElementHandle"]: ...

    def path(self) -> str: ...


@runtime_checkable
class Snapshot(Protocol):
    url: str
    engine: str
    captured_at: str

    def query(self, selector: str) -> list[ElementHandle]: ...

    def stylesheets(self) -> list[StylesheetAccess]: ...


class SnapshotProvider(Protocol):
    def snapshot(self, url: str, engine: str) -> Snapshot: ...


_COMMENT_RE = re.compile(r"/\*.*?\*/", re.S)
_PSEUDO_RE = re.compile(r"::?(before|after)\s*$", re.I)


def parse_declarations(body: str) -> tuple[tuple[str, str], ...]:
    out: list[tuple[str, str]] = []
    for chunk in body.split(";"):
        if ":" not in chunk:
            continue
        name, value = chunk.split(":", 1)
        name = name.strip().lower()
        value = re.sub(r"\s*!important\s*$", "", value.strip(), flags=re.I)
        if name:
            out.append((name, value))
    return tuple(out)


def _block_end(text: str, open_idx: int) -> int:
    depth = 0
    for i in range(open_idx, len(text)):
        ch = text[i]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return len(text)


def parse_css(css_text: str, media: str | None = None) -> list[CssRule]:
    """Split stylesheet text into flat rules; @media blocks tag their children."""
    text = _COMMENT_RE.sub("", css_text or "")
    rules: list[CssRule] = []
    pos = 0
    while pos < len(text):
        brace = text.find("{", pos)
        semi = text.find(";", pos)
        if brace == -1:
            break
        if text[pos:].lstrip().startswith("@") and semi != -1 and semi < brace:
            # @import / @charset statements
            pos = semi + 1
            continue
        end = _block_end(text, brace)
        prelude = text[pos:brace].strip()
        body = text[brace + 1 : end]
        pos = end + 1
        lowered = prelude.lower()
        if lowered.startswith("@media"):
            rules.extend(parse_css(body, media=prelude[6:].strip()))
            continue
        if lowered.startswith("@"):
            continue
        decls = parse_declarations(body)
        for selector in prelude.split(","):
            selector = " ".join(selector.split())
            if selector:
                rules.append(CssRule(selector=selector, declarations=decls, media=media))
    return rules


_STYLE_DEFAULTS = {
    "position": "static",
    "float": "none",
    "order": "0",
    "column-count": "auto",
    "display": "",
    "visibility": "visible",
    "content": "none",
}
_TEXTLESS_TAGS = {"script", "style", "noscript", "template"}


class HtmlElement:
    def __init__(self, snapshot: "HtmlSnapshot", node: Tag, index: int) -> None:
        self._snapshot = snapshot
        self._node = node
        self.tag = node.name.lower()
        self.index = index

    def __repr__(self) -> str:
        return f"<HtmlElement {self.tag} #{self.index}>"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, HtmlElement) and other._node is self._node

    def __hash__(self) -> int:
        return hash((id(self._snapshot), self.index))

    @property
    def attrs(self) -> dict[str, str]:
        out: dict[str, str] = {}
        for k, v in self._node.attrs.items():
            out[k.lower()] = " ".join(v) if isinstance(v, (list, tuple)) else str(v)
        return out

    def attr(self, name: str) -> str | None:
        return self.attrs.get(name.lower())

    def text(self, *, collapse: bool = True) -> str:
        chunks = []
        for s in self._node.find_all(string=True):
            if not isinstance(s, NavigableString) or type(s) is not NavigableString:
                continue
            if any(p.name in _TEXTLESS_TAGS for p in s.parents if isinstance(p, Tag)):
                continue
            chunks.append(str(s))
        raw = "".join(chunks)
        return " ".join(raw.split()) if collapse else raw

    def outer_html(self, limit: int | None = None) -> str:
        html = str(self._node)
        if limit is not None and len(html) > limit:
            return html[:limit]
        return html

    def style(self, prop: str, pseudo: str | None = None) -> str:
        return self._snapshot._computed_style(self, pseudo).get(
            prop.lower(), _STYLE_DEFAULTS.get(prop.lower(), "")
        )

    def parent(self) -> "HtmlElement | None":
        node = self._node.parent
        if not isinstance(node, Tag) or node.name == "[document]":
            return None
        return self._snapshot._wrap(node)

    def children(self) -> list["HtmlElement"]:
        return [self._snapshot._wrap(c) for c in self._node.children if isinstance(c, Tag)]

    def previous_sibling(self) -> "HtmlElement | None":
        node = self._node.find_previous_sibling()
        return self._snapshot._wrap(node) if isinstance(node, Tag) else None

    def next_sibling(self) -> "HtmlElement | None":
        node = self._node.find_next_sibling()
        return self._snapshot._wrap(node) if isinstance(node, Tag) else None

    def closest(self, selector: str) -> "HtmlElement | None":
        node = soupsieve.closest(selector, self._node)
        return self._snapshot._wrap(node) if isinstance(node, Tag) else None

    def query(self, selector: str) -> list["HtmlElement"]:
        return [self._snapshot._wrap(n) for n in self._node.select(selector)]

    def path(self) -> str:
        parts: list[str] = []
        node: Any = self._node
        while isinstance(node, Tag) and node.name != "[document]":
            position = 1 + len(node.find_previous_siblings(node.name))
            parts.append(f"{node.name.lower()}[{position}]")
            node = node.parent
        return "/" + "/".join(reversed(parts))


class HtmlSnapshot:
    """Frozen, queryable view over one HTML document."""

    def __init__(
        self,
        html: str,
        *,
        url: str = "about:blank",
        engine: str = "default",
        captured_at: str | None = None,
        stylesheets: Iterable[StylesheetAccess | str] = (),
    ) -> None:
        self.url = url
        self.engine = engine
        self.captured_at = captured_at or _now()
        self._soup = BeautifulSoup(html or "", "html.parser")
        self._order: dict[int, int] = {}
        for idx, node in enumerate(self._soup.find_all(True)):
            self._order[id(node)] = idx
        self._wrapped: dict[int, HtmlElement] = {}
        sheets: list[StylesheetAccess] = []
        for sheet in stylesheets:
            if isinstance(sheet, StylesheetAccess):
                sheets.append(sheet)
            else:
                sheets.append(StylesheetAccess.from_css(str(sheet)))
        for node in self._soup.find_all("style"):
            sheets.append(StylesheetAccess.from_css(node.get_text()))
        self._sheets = tuple(sheets)
        self._selector_cache: dict[str, Any] = {}
        self._style_cache: dict[tuple[int, str | None], dict[str, str]] = {}

    def __repr__(self) -> str:
        return f"<HtmlSnapshot {self.url} ({self.engine})>"

    def _wrap(self, node: Tag) -> HtmlElement:
        key = id(node)
        el = self._wrapped.get(key)
        if el is None:
            el = HtmlElement(self, node, self._order.get(key, -1))
            self._wrapped[key] = el
        return el

    def query(self, selector: str) -> list[HtmlElement]:
        return [self._wrap(n) for n in self._soup.select(selector)]

    def stylesheets(self) -> list[StylesheetAccess]:
        return list(self._sheets)

    def _compiled(self, selector: str) -> Any:
        if selector not in self._selector_cache:
            try:
                self._selector_cache[selector] = soupsieve.compile(selector)
            except (soupsieve.SelectorSyntaxError, NotImplementedError, ValueError):
                # :hover, :focus and friends have no static meaning
                self._selector_cache[selector] = None
        return self._selector_cache[selector]

    def _computed_style(self, el: HtmlElement, pseudo: str | None) -> dict[str, str]:
        pseudo_key = pseudo.lower().lstrip(":") if pseudo else None
        key = (el.index, pseudo_key)
        cached = self._style_cache.get(key)
        if cached is not None:
            return cached
        out: dict[str, str] = {}
        for sheet in self._sheets:
            if sheet.denied:
                continue
            for rule in sheet.rules:
                if rule.media and rule.media.strip().lower() not in {"all", "screen"}:
                    continue
                selector = rule.selector
                m = _PSEUDO_RE.search(selector)
                rule_pseudo = m.group(1).lower() if m else None
                if rule_pseudo != pseudo_key:
                    continue
                if m:
                    selector = selector[: m.start()].strip() or "*"
                compiled = self._compiled(selector)
                if compiled is not None and compiled.match(el._node):
                    out.update(dict(rule.declarations))
        if pseudo_key is None:
            out.update(dict(parse_declarations(el.attr("style") or "")))
        self._style_cache[key] = out
        return out

"""Inline ``style`` attribute editing.

Declarations are parsed into ordered (property, value) pairs and serialized
back as ``"prop: value; prop: value;"``. Serializing a parsed style is a
fixed point, which is what makes the post-processors idempotent.

Example:
    >>> set_declaration("color: red; margin: 0;", "color", "blue")
    'color: blue; margin: 0;'
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

_STYLE_ATTR_RE = re.compile(r"""\sstyle\s*=\s*(["'])(.*?)\1""", re.IGNORECASE | re.DOTALL)


def parse_style(style: str) -> list[tuple[str, str]]:
    """Split a style string into ordered (property, value) pairs.

    Property names are lowercased; empty and malformed declarations are
    dropped. A repeated property keeps its last value at its first position.
    """
    declarations: list[tuple[str, str]] = []
    positions: dict[str, int] = {}
    for chunk in style.split(";"):
        prop, sep, value = chunk.partition(":")
        prop = prop.strip().lower()
        value = " ".join(value.split())
        if not sep or not prop or not value:
            continue
        if prop in positions:
            declarations[positions[prop]] = (prop, value)
        else:
            positions[prop] = len(declarations)
            declarations.append((prop, value))
    return declarations


def serialize_style(declarations: list[tuple[str, str]]) -> str:
    """Join (property, value) pairs into a style string."""
    return " ".join(f"{prop}: {value};" for prop, value in declarations)


def normalize_style(style: str) -> str:
    """Canonicalize whitespace and separators of a style string."""
    return serialize_style(parse_style(style))


def get_declaration(style: str, prop: str) -> str | None:
    """Return the value of ``prop`` or None."""
    prop = prop.lower()
    for name, value in parse_style(style):
        if name == prop:
            return value
    return None


def set_declaration(style: str, prop: str, value: str) -> str:
    """Set ``prop`` to ``value``, replacing in place or appending."""
    return update_declarations(style, {prop: value})


def ensure_declaration(style: str, prop: str, value: str) -> str:
    """Add ``prop`` only if the style does not declare it already."""
    return update_declarations(style, {prop: value}, overwrite=False)


def remove_declarations(style: str, *props: str) -> str:
    """Drop every listed property."""
    drop = {p.lower() for p in props}
    return serialize_style([d for d in parse_style(style) if d[0] not in drop])


def update_declarations(
    style: str,
    updates: Mapping[str, str],
    *,
    overwrite: bool = True,
) -> str:
    """Apply several declarations at once.

    Args:
        style: Existing style string (may be empty)
        updates: Property -> value pairs, applied in order
        overwrite: Replace properties already present; when False only
            missing properties are added

    Returns:
        Canonical style string
    """
    declarations = parse_style(style)
    index = {prop: i for i, (prop, _) in enumerate(declarations)}
    for prop, value in updates.items():
        prop = prop.lower()
        value = " ".join(value.split())
        if prop in index:
            if overwrite:
                declarations[index[prop]] = (prop, value)
        else:
            index[prop] = len(declarations)
            declarations.append((prop, value))
    return serialize_style(declarations)


def restyle_tags(
    html: str,
    tags: tuple[str, ...] | str,
    transform: Callable[[str], str],
    *,
    where: Callable[[str], bool] | None = None,
) -> str:
    """Rewrite the style attribute of every opening tag named in ``tags``.

    ``transform`` receives the current style ("" when the tag has none) and
    returns the new one. A missing attribute is inserted right after the tag
    name; an empty result leaves a tag without style untouched. ``where``
    receives the raw attribute text and restricts which tags are touched.
    """
    names = (tags,) if isinstance(tags, str) else tags
    pattern = re.compile(
        r"<(" + "|".join(re.escape(t) for t in names) + r")\b([^>]*)>",
        re.IGNORECASE,
    )

    def repl(match: re.Match[str]) -> str:
        tag, attrs = match.group(1), match.group(2)
        if where is not None and not where(attrs):
            return match.group(0)
        self_closing = attrs.endswith("/")
        if self_closing:
            attrs = attrs[:-1]
        attr_match = _STYLE_ATTR_RE.search(attrs)
        current = attr_match.group(2) if attr_match else ""
        new_style = transform(current)
        if attr_match:
            attrs = (
                attrs[: attr_match.start()]
                + f' style="{new_style}"'
                + attrs[attr_match.end() :]
            )
        elif new_style:
            attrs = f' style="{new_style}"' + attrs
        return f"<{tag}{attrs}{'/' if self_closing else ''}>"

    return pattern.sub(repl, html)


#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/mdweave/parsers/directives.py
"""Generic directive syntax for mistune.

This module is a mistune plugin that recognizes three directive forms and
emits tokens that :class:`~mdweave.parsers.markdown.MarkdownParser` turns
into directive nodes:

Container directive (block content between fences)::

    :::warning[Optional label]{#id .class key="value"}
    Be careful.
    :::

Leaf directive (a single line)::

    ::video{src="https://example.com/v" title="Demo" type="youtube"}

Text directive (inline)::

    Press :kbd[Ctrl]{.key} to continue.

A container is closed by a line of at least as many colons as opened it.
Nested containers and fenced code inside the body are tracked so their fences
never close the outer container. A container without a closing fence runs to
the end of the document.

Attribute lists accept ``key="value"``, ``key='value'``, ``key=value``, a bare
``key`` (empty value), ``#id`` and ``.class`` (classes are space-joined).
A line whose label or attribute list is malformed is not a directive and is
read as ordinary text.

Examples
--------
    >>> import mistune
    >>> from mdweave.parsers.directives import directives
    >>> md = mistune.create_markdown(renderer=None, plugins=[directives])
    >>> md(":::note\\nHello\\n:::\\n")[0]["type"]
    'container_directive'

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Match, Optional

if TYPE_CHECKING:
    from mistune.block_parser import BlockParser
    from mistune.core import BlockState, InlineState
    from mistune.inline_parser import InlineParser
    from mistune.markdown import Markdown

__all__ = ["directives", "parse_attributes", "split_directive_suffix"]

CONTAINER_RULE = "container_directive"
LEAF_RULE = "leaf_directive"
TEXT_RULE = "text_directive"

# Named groups must be unique across all rules mistune joins into one pattern
CONTAINER_PATTERN = r"^ {0,3}(?P<cdir_fence>:{3,})(?P<cdir_name>[A-Za-z][\w-]*)(?P<cdir_rest>[^\n]*)$"
LEAF_PATTERN = r"^ {0,3}::(?P<ldir_name>[A-Za-z][\w-]*)(?P<ldir_rest>[^\n]*)$"
TEXT_PATTERN = r":(?<![\w:\\]:)(?P<tdir_name>[A-Za-z][\w-]*)(?=[\[{])"

_CLOSING_FENCE_RE = re.compile(r"^ {0,3}(:{3,})[ \t]*$")
_OPENING_FENCE_RE = re.compile(r"^ {0,3}(:{3,})[A-Za-z]")
_CODE_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_CODE_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})[ \t]*$")

_ATTRIBUTE_RE = re.compile(
    r"""
    [ \t]*
    (?:
        \#(?P<id>[^\s#.{}"'=]+)
      | \.(?P<cls>[^\s#.{}"'=]+)
      | (?P<key>[A-Za-z_:][\w:.-]*)
        (?:[ \t]*=[ \t]*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`{}]+)))?
    )
    """,
    re.VERBOSE,
)


# =============================================================================
# Label and attribute scanning
# =============================================================================


def parse_attributes(text: str) -> dict[str, str]:
    """Parse the inside of a ``{...}`` attribute list.

    Parameters
    ----------
    text : str
        Attribute list without the surrounding braces

    Returns
    -------
    dict of str to str
        Attribute names mapped to values. ``#id`` sets ``id``; every ``.name``
        and ``class=`` value is joined into ``class``. For other repeated
        keys the last value wins.

    Raises
    ------
    ValueError
        If the text is not a well-formed attribute list

    Examples
    --------
    >>> parse_attributes('#intro .note .wide title="Read me" hidden')
    {'id': 'intro', 'class': 'note wide', 'title': 'Read me', 'hidden': ''}

    """
    attributes: dict[str, str] = {}
    classes: list[str] = []
    pos = 0
    while pos < len(text):
        if not text[pos:].strip():
            break
        m = _ATTRIBUTE_RE.match(text, pos)
        if not m or m.end() == pos:
            raise ValueError(f"Malformed attribute list at position {pos}: {text!r}")
        # key=value pairs must be followed by whitespace; #id and .class may be chained
        following = text[m.end()] if m.end() < len(text) else " "
        if not following.isspace() and not (following in "#." and m.group("key") is None):
            raise ValueError(f"Malformed attribute list at position {m.end()}: {text!r}")
        pos = m.end()

        if m.group("id") is not None:
            attributes["id"] = m.group("id")
        elif m.group("cls") is not None:
            classes.append(m.group("cls"))
        else:
            key = m.group("key")
            value = next((v for v in (m.group("dq"), m.group("sq"), m.group("bare")) if v is not None), "")
            if key == "class":
                classes.extend(value.split())
            else:
                attributes[key] = value

    if classes:
        attributes["class"] = " ".join(classes)
    return attributes


def _find_label_end(text: str, start: int) -> int:
    """Return the index of the ``]`` matching the ``[`` at ``start``, or -1."""
    depth = 0
    pos = start
    while pos < len(text):
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def _find_attributes_end(text: str, start: int) -> int:
    """Return the index of the ``}`` closing the ``{`` at ``start``, or -1."""
    quote: Optional[str] = None
    for pos in range(start + 1, len(text)):
        char = text[pos]
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "}":
            return pos
        elif char in "{\n":
            return -1
    return -1


def split_directive_suffix(text: str) -> Optional[tuple[Optional[str], dict[str, str], int]]:
    """Split an optional ``[label]`` and ``{attributes}`` off the start of ``text``.

    Parameters
    ----------
    text : str
        Text following the directive name

    Returns
    -------
    tuple or None
        ``(label, attributes, end)`` where ``label`` is None when absent and
        ``end`` is the index just past the consumed suffix. None when a label
        or attribute list is opened but malformed.

    """
    pos = 0
    label: Optional[str] = None
    if text.startswith("["):
        end = _find_label_end(text, 0)
        if end < 0:
            return None
        label = text[1:end]
        pos = end + 1

    attributes: dict[str, str] = {}
    if text.startswith("{", pos):
        end = _find_attributes_end(text, pos)
        if end < 0:
            return None
        try:
            attributes = parse_attributes(text[pos + 1 : end])
        except ValueError:
            return None
        pos = end + 1

    return label, attributes, pos


def _block_suffix(rest: str) -> Optional[tuple[Optional[str], dict[str, str]]]:
    """Parse the trailer of a block directive line, which must end after it."""
    parsed = split_directive_suffix(rest)
    if parsed is None:
        return None
    label, attributes, end = parsed
    if rest[end:].strip():
        return None
    return label, attributes


# =============================================================================
# Block rules
# =============================================================================


def _child_rules(block: "BlockParser", state: "BlockState") -> list[str]:
    """Rules for parsing a container body, without directives past the nesting limit."""
    rules = list(block.rules)
    if state.depth() >= block.max_nested_level - 1:
        rules = [rule for rule in rules if rule not in (CONTAINER_RULE, LEAF_RULE)]
    return rules


def _closes_code_fence(line: str, fence: str) -> bool:
    m = _CODE_FENCE_CLOSE_RE.match(line)
    return bool(m) and m.group(1)[0] == fence[0] and len(m.group(1)) >= len(fence)


def _find_container_end(src: str, start: int, fence_length: int) -> tuple[int, int]:
    """Scan container body lines from ``start``.

    Returns
    -------
    tuple of int
        ``(body_end, end_pos)``: where the body stops and where parsing resumes.
        Both equal ``len(src)`` for an unclosed container.

    """
    open_containers: list[int] = []
    code_fence: Optional[str] = None
    pos = start
    while pos < len(src):
        line_end = src.find("\n", pos)
        next_pos = len(src) if line_end < 0 else line_end + 1
        line = src[pos:next_pos].rstrip("\n")
        pos_of_line, pos = pos, next_pos

        if code_fence is not None:
            if _closes_code_fence(line, code_fence):
                code_fence = None
            continue

        code = _CODE_FENCE_RE.match(line)
        opening = _OPENING_FENCE_RE.match(line)
        closing = _CLOSING_FENCE_RE.match(line)
        if code:
            code_fence = code.group(1)
        elif opening:
            open_containers.append(len(opening.group(1)))
        elif closing:
            length = len(closing.group(1))
            if open_containers:
                if length >= open_containers[-1]:
                    open_containers.pop()
            elif length >= fence_length:
                return pos_of_line, next_pos
    return len(src), len(src)


def parse_container_directive(block: "BlockParser", m: Match[str], state: "BlockState") -> Optional[int]:
    """Parse a ``:::name`` container directive into a token with block children."""
    suffix = _block_suffix(m.group("cdir_rest"))
    if suffix is None:
        return None
    label, attributes = suffix

    line_end = state.find_line_end_at(m.start())
    body_end, end_pos = _find_container_end(state.src, line_end, len(m.group("cdir_fence")))
    body = state.src[line_end:body_end]
    if body and not body.endswith("\n"):
        body += "\n"

    child = state.child_state(body)
    block.parse(child, _child_rules(block, state))

    children: list[dict[str, Any]] = []
    if label is not None:
        children.append({"type": "directive_label", "text": label})
    children.extend(child.tokens)

    state.append_token(
        {
            "type": CONTAINER_RULE,
            "attrs": {"name": m.group("cdir_name"), "attributes": attributes},
            "children": children,
        }
    )
    return end_pos


def parse_leaf_directive(block: "BlockParser", m: Match[str], state: "BlockState") -> Optional[int]:
    """Parse a ``::name`` leaf directive line."""
    suffix = _block_suffix(m.group("ldir_rest"))
    if suffix is None:
        return None
    label, attributes = suffix

    token: dict[str, Any] = {
        "type": LEAF_RULE,
        "attrs": {"name": m.group("ldir_name"), "attributes": attributes},
    }
    if label:
        token["text"] = label
    else:
        token["children"] = []
    state.append_token(token)
    return state.find_line_end_at(m.start())


# =============================================================================
# Inline rule
# =============================================================================


def parse_text_directive(inline: "InlineParser", m: Match[str], state: "InlineState") -> Optional[int]:
    """Parse a ``:name[label]{attrs}`` text directive; needs a label or attributes."""
    parsed = split_directive_suffix(state.src[m.end() :])
    if parsed is None:
        return None
    label, attributes, consumed = parsed
    if consumed == 0:
        return None

    children: list[dict[str, Any]] = []
    if label:
        new_state = state.copy()
        new_state.src = label
        children = inline.render(new_state)

    state.append_token(
        {
            "type": TEXT_RULE,
            "attrs": {"name": m.group("tdir_name"), "attributes": attributes},
            "children": children,
        }
    )
    return m.end() + consumed


# =============================================================================
# Plugin entry point
# =============================================================================


def directives(md: "Markdown") -> None:
    """Mistune plugin adding container, leaf and text directives.

    Directives are also recognized inside block quotes and list items.

    Parameters
    ----------
    md : mistune.Markdown
        Markdown instance to extend

    """
    md.block.register(CONTAINER_RULE, CONTAINER_PATTERN, parse_container_directive, before="list")
    md.block.register(LEAF_RULE, LEAF_PATTERN, parse_leaf_directive, before="list")
    for rules in (md.block.block_quote_rules, md.block.list_rules):
        for name in (CONTAINER_RULE, LEAF_RULE):
            if name not in rules:
                md.block.insert_rule(rules, name, before="list")
    md.inline.register(TEXT_RULE, TEXT_PATTERN, parse_text_directive, before="link")

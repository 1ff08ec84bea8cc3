"""Format free-text answers into paragraph and list markup.

Answers coming back from the search backend are plain text with a loose
structure: paragraphs separated by blank lines, numbered items (``1. text``)
and bullet items (``- text``, ``* text``, ``• text``). This module turns that
text into block-level HTML for the search page.

The work is split in two steps so each can be tested on its own:

- ``parse_blocks`` runs a small state machine over the lines and returns
  ``Paragraph`` / ``OrderedList`` / ``UnorderedList`` blocks.
- ``render_blocks`` turns those blocks into markup.

Captured text is inserted verbatim unless ``escape=True`` is passed. Backend
answers and snippets carry ``<em>`` highlight tags that must survive, so
escaping is left to callers that handle untrusted text.
"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

NUMBERED_ITEM_RE = re.compile(r"^([0-9]+)\.\s+(.+)")
BULLET_ITEM_RE = re.compile(r"^[•\-\*]\s+(.+)")

PARAGRAPH_CLASS = "mb-4"
ORDERED_LIST_CLASS = "list-decimal list-inside space-y-3 my-4 pl-4"
UNORDERED_LIST_CLASS = "list-disc list-inside space-y-3 my-4 pl-4"
LIST_ITEM_CLASS = "text-sm leading-relaxed"


class LineKind(Enum):
    NUMBERED_ITEM = "numbered_item"
    BULLET_ITEM = "bullet_item"
    BLANK = "blank"
    PLAIN_TEXT = "plain_text"


class State(Enum):
    IDLE = "idle"
    IN_PARAGRAPH = "in_paragraph"
    IN_ORDERED_LIST = "in_ordered_list"
    IN_UNORDERED_LIST = "in_unordered_list"


@dataclass(frozen=True)
class Paragraph:
    text: str
    kind: str = field(default="paragraph", init=False)

    def to_dict(self) -> Dict[str, object]:
        return {"kind": self.kind, "text": self.text}


@dataclass(frozen=True)
class OrderedList:
    items: Tuple[str, ...]
    kind: str = field(default="ordered_list", init=False)

    def to_dict(self) -> Dict[str, object]:
        return {"kind": self.kind, "items": list(self.items)}


@dataclass(frozen=True)
class UnorderedList:
    items: Tuple[str, ...]
    kind: str = field(default="unordered_list", init=False)

    def to_dict(self) -> Dict[str, object]:
        return {"kind": self.kind, "items": list(self.items)}


Block = Union[Paragraph, OrderedList, UnorderedList]


def classify_line(raw_line: str) -> Tuple[LineKind, str]:
    """Classify one line and return ``(kind, content)``.

    Numbered items win over bullets, bullets over blanks. The number in a
    numbered item is dropped; lists are renumbered by position.
    """
    line = raw_line.strip()

    numbered = NUMBERED_ITEM_RE.match(line)
    if numbered:
        return LineKind.NUMBERED_ITEM, numbered.group(2)

    bullet = BULLET_ITEM_RE.match(line)
    if bullet:
        return LineKind.BULLET_ITEM, bullet.group(1)

    if line == "":
        return LineKind.BLANK, ""

    return LineKind.PLAIN_TEXT, line


class _BlockBuilder:
    """Accumulator for a single ``parse_blocks`` call."""

    def __init__(self) -> None:
        self.state = State.IDLE
        self.paragraph = ""
        self.items: List[str] = []
        self.blocks: List[Block] = []

    def feed(self, kind: LineKind, content: str) -> None:
        state = self.state

        if kind is LineKind.NUMBERED_ITEM:
            if state is not State.IN_ORDERED_LIST:
                self._close()
                self.state = State.IN_ORDERED_LIST
            self.items.append(content)

        elif kind is LineKind.BULLET_ITEM:
            if state is not State.IN_UNORDERED_LIST:
                self._close()
                self.state = State.IN_UNORDERED_LIST
            self.items.append(content)

        elif kind is LineKind.BLANK:
            self._close()

        else:
            if state in (State.IN_ORDERED_LIST, State.IN_UNORDERED_LIST):
                self._close()
            if self.paragraph:
                self.paragraph = f"{self.paragraph} {content}"
            else:
                self.paragraph = content
            self.state = State.IN_PARAGRAPH

    def finish(self) -> List[Block]:
        self._close()
        return self.blocks

    def _close(self) -> None:
        """Emit whatever the current state holds and go back to idle."""
        state = self.state
        if state is State.IN_PARAGRAPH and self.paragraph:
            self.blocks.append(Paragraph(self.paragraph))
        elif state is State.IN_ORDERED_LIST and self.items:
            self.blocks.append(OrderedList(tuple(self.items)))
        elif state is State.IN_UNORDERED_LIST and self.items:
            self.blocks.append(UnorderedList(tuple(self.items)))

        self.state = State.IDLE
        self.paragraph = ""
        self.items = []


def parse_blocks(raw_text: Optional[str]) -> List[Block]:
    """Split ``raw_text`` into paragraph and list blocks, in input order."""
    if not raw_text:
        return []

    builder = _BlockBuilder()
    for raw_line in raw_text.split("\n"):
        kind, content = classify_line(raw_line)
        builder.feed(kind, content)
    return builder.finish()


def _render_items(items: Tuple[str, ...], escape: bool) -> str:
    return "".join(
        f'<li class="{LIST_ITEM_CLASS}">{_text(item, escape)}</li>' for item in items
    )


def _text(value: str, escape: bool) -> str:
    return html.escape(value) if escape else value


def render_block(block: Block, *, escape: bool = False) -> str:
    if isinstance(block, Paragraph):
        return f'<p class="{PARAGRAPH_CLASS}">{_text(block.text, escape)}</p>'
    if isinstance(block, OrderedList):
        return f'<ol class="{ORDERED_LIST_CLASS}">{_render_items(block.items, escape)}</ol>'
    return f'<ul class="{UNORDERED_LIST_CLASS}">{_render_items(block.items, escape)}</ul>'


def render_blocks(blocks: List[Block], *, escape: bool = False) -> str:
    return "".join(render_block(block, escape=escape) for block in blocks)


def format_text_with_lists(raw_text: Optional[str], *, escape: bool = False) -> str:
    """Format ``raw_text`` as paragraph/list HTML.

    Args:
        raw_text: Free text using ``\\n`` line breaks. ``None`` and ``""``
            produce an empty string.
        escape: HTML-escape captured text. Off by default, so highlight
            markup from the backend is kept as-is.

    Returns:
        Concatenated block markup.
    """
    return render_blocks(parse_blocks(raw_text), escape=escape)

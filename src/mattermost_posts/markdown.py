from __future__ import annotations

from collections.abc import Callable

import mistune

from .models import Block

DocumentParser = Callable[[str], list[Block]]

_markdown = mistune.create_markdown(renderer="ast")


def parse_markdown(text: str) -> list[Block]:
    """Parse text as Markdown and return its block-level AST.

    Top-level ``blank_line`` tokens are dropped, so empty text gives ``[]``.
    """
    return [b for b in _markdown(text) if b["type"] != "blank_line"]


def block_quote(blocks: list[Block]) -> Block:
    return {"type": "block_quote", "children": blocks}

"""GitHub-style alerts.

    > [!WARNING]
    > Streaming output may be incomplete.

The label is matched case-insensitively and may be wrapped in emphasis
markers (``> **[!NOTE]**``). Anything else stays a plain blockquote.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.lexer.block import collect_quote
from arroyo.tokens import Alert

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_LABEL = re.compile(r"\s*[*_]*\[!(NOTE|TIP|IMPORTANT|WARNING|CAUTION)\][*_]*[ \t]*\n?", re.IGNORECASE)


def tokenize_alert(src: str, lexer: Lexer) -> Alert | None:
    quote = collect_quote(src, lexer)
    if quote is None:
        return None
    end, text = quote
    match = _LABEL.match(text)
    if match is None:
        return None
    body = text[match.end() :]
    return Alert(
        raw=src[:end],
        variant=match.group(1).lower(),  # type: ignore[arg-type]
        text=body,
        children=tuple(lexer.block_tokens(body)),
    )


ALERT = Extension("alert", Level.BLOCK, tokenize_alert, start_chars=frozenset(" >"))

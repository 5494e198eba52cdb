"""Literal ``<br>`` tags as hard line breaks."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from arroyo.extensions.protocol import Extension, Level
from arroyo.tokens import Br

if TYPE_CHECKING:
    from arroyo.lexer.core import Lexer

_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)


def tokenize_br(src: str, lexer: Lexer) -> Br | None:
    match = _BR.match(src)
    if match is None:
        return None
    return Br(raw=match.group(0))


BR = Extension("br", Level.INLINE, tokenize_br, start_chars=frozenset("<"))

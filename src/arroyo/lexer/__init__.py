"""Tokenizer pipeline for arroyo.

The lexer tries the registered extension rules, then the baseline grammar,
at every position and drives recursive descent into nested content.

Layout:
lexer/
├── __init__.py          # Re-exports Lexer and the module entry points
├── core.py              # Lexer, lex(), lex_inline(), parse_blocks()
├── block.py             # Baseline block rules
├── inline.py            # Baseline inline rules
├── emphasis.py          # Emphasis/strong pairing
├── flanking.py          # Delimiter-run flanking (shared with arroyo.repair)
├── lines.py             # Line classifiers (shared with arroyo.repair)
├── scanmemo.py          # ScanMemo for unclosed delimiter scans
└── charsets.py          # Character sets

Usage:
    >>> from arroyo.lexer import lex
    >>> [t.kind for t in lex("# Title\n\nSome *text*")]
    ['heading', 'paragraph']

"""

from arroyo.lexer.core import Lexer, Rule, lex, lex_inline, normalize_newlines, parse_blocks
from arroyo.lexer.scanmemo import ScanMemo

__all__ = ["Lexer", "Rule", "ScanMemo", "lex", "lex_inline", "normalize_newlines", "parse_blocks"]

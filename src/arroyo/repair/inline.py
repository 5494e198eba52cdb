"""Inline delimiter scanning for the repairer.

InlineScanner walks one paragraph at a time, segment by segment, keeping a
single stack of unmatched openers. Delimiter runs are classified with the
same flanking rules the emphasis tokenizer uses, so an opener the scanner
closes is one the lexer would have paired.

Once a literal construct (code span, math, link destination, footnote
label) is on top of the stack, nothing else is recognized until its closer.
"""

from __future__ import annotations

from arroyo.lexer.charsets import is_whitespace, is_word_char
from arroyo.lexer.flanking import classify_run, run_length
from arroyo.repair.state import LITERAL_KINDS, SINGLE_LINE_KINDS, Entry, Kind

INCOMPLETE_LINK = "arroyo:incomplete-link"
INCOMPLETE_IMAGE = "arroyo:incomplete-image"
INCOMPLETE_FOOTNOTE = "arroyo:incomplete-footnote"

_URL_PREFIXES = ("http://", "https://", "www.")
_TASK_MARKERS = frozenset({"", "x", "X"})
_TITLE_QUOTES = frozenset("\"'")


class InlineScanner:
    """Tracks unmatched inline openers over ``text``.

    Offsets passed to scan() index into the full text so entries can look
    back at their content when closers are built.
    """

    __slots__ = ("_text", "_stack", "_segment")

    def __init__(self, text: str) -> None:
        self._text = text
        self._stack: list[Entry] = []
        self._segment = 0

    @property
    def open_entries(self) -> tuple[Entry, ...]:
        return tuple(self._stack)

    def reset(self) -> None:
        """Abandon every opener (a new block started)."""
        self._stack.clear()

    def end_line(self) -> None:
        """Drop openers whose constructs cannot span a line break."""
        self._stack = [entry for entry in self._stack if entry.kind not in SINGLE_LINE_KINDS]
        for entry in self._stack:
            if entry.kind is Kind.DESTINATION and entry.filled:
                entry.spaced = True

    def scan(self, start: int, end: int) -> None:
        """Scan ``text[start:end]``, a run of inline content within one line."""
        text = self._text
        self._segment = start
        i = start
        while i < end:
            if self._stack and self._stack[-1].kind in LITERAL_KINDS:
                i = self._literal(self._stack[-1], i, end)
                continue

            c = text[i]
            if c == "\\":
                i += 2
            elif c == "`":
                run = run_length(text, i, "`")
                self._stack.append(Entry(Kind.CODE, marker="`", length=run, start=i + run))
                i += run
            elif c == "*" or c == "_":
                i = self._emphasis(i, end, c)
            elif c == "~" or c == "^":
                i = self._span(i, end, c)
            elif c == "$":
                i = self._dollar(i, end)
            elif c == "!" and text.startswith("[", i + 1):
                self._stack.append(Entry(Kind.BRACKET, start=i + 2, image=True))
                i += 2
            elif c == "[":
                if text.startswith("^", i + 1):
                    self._stack.append(Entry(Kind.FOOTNOTE, start=i + 2))
                    i += 2
                else:
                    self._stack.append(Entry(Kind.BRACKET, start=i + 1))
                    i += 1
            elif c == "]":
                i = self._close_bracket(i, end)
            elif c == "<":
                i = self._angle(i, end)
            elif c in "hw" and text.startswith(_URL_PREFIXES, i) and not is_word_char(self._before(i)):
                while i < end and not text[i].isspace():
                    i += 1
            else:
                i += 1

    # -- Delimiters -----------------------------------------------------------

    def _before(self, i: int) -> str:
        return self._text[i - 1] if i > self._segment else ""

    def _find(self, kind: Kind, marker: str | None = None) -> int | None:
        """Index of the most recent open ``kind`` not hidden behind a bracket."""
        for index in range(len(self._stack) - 1, -1, -1):
            entry = self._stack[index]
            if entry.kind is kind and (marker is None or entry.marker == marker):
                return index
            if entry.kind is Kind.BRACKET:
                return None
        return None

    def _emphasis(self, i: int, end: int, char: str) -> int:
        stop = i + run_length(self._text, i, char)
        before = self._before(i)
        after = self._text[stop] if stop < end else ""
        if char == "*" and is_word_char(before) and is_word_char(after):
            return stop

        flanking = classify_run(before, after, char)
        remaining = stop - i
        if flanking.can_close:
            while remaining:
                index = self._find(Kind.EMPHASIS, char)
                if index is None:
                    break
                entry = self._stack[index]
                used = min(remaining, entry.length)
                entry.length -= used
                remaining -= used
                del self._stack[index + 1 :]
                if not entry.length:
                    self._stack.pop()
        if remaining and flanking.can_open:
            self._stack.append(Entry(Kind.EMPHASIS, marker=char, length=remaining, start=stop))
        return stop

    def _span(self, i: int, end: int, char: str) -> int:
        run = run_length(self._text, i, char)
        stop = i + run
        if (char == "^" and run != 1) or run > 2:
            return stop

        kind = Kind.SUP if char == "^" else Kind.STRIKE if run == 2 else Kind.SUB
        before = self._before(i)
        after = self._text[stop] if stop < end else ""
        index = self._find(kind)
        if index is not None and not is_whitespace(before):
            del self._stack[index:]
        elif not is_whitespace(after):
            if index is not None:
                del self._stack[index]
            self._stack.append(Entry(kind, marker=char * run, length=run, start=stop))
        return stop

    def _dollar(self, i: int, end: int) -> int:
        text = self._text
        if text.startswith("$$", i):
            self._stack.append(Entry(Kind.DISPLAY_MATH, marker="$$", start=i + 2))
            return i + 2
        after = text[i + 1] if i + 1 < end else ""
        if is_word_char(self._before(i)) or after.isdigit() or is_whitespace(after):
            # Prices such as $129 or 5$ stay literal
            return i + 1
        self._stack.append(Entry(Kind.MATH, marker="$", start=i + 1))
        return i + 1

    def _close_bracket(self, i: int, end: int) -> int:
        index = None
        for position in range(len(self._stack) - 1, -1, -1):
            if self._stack[position].kind is Kind.BRACKET:
                index = position
                break
        if index is None:
            return i + 1
        image = self._stack[index].image
        del self._stack[index:]
        if i + 1 < end and self._text[i + 1] == "(":
            self._stack.append(Entry(Kind.DESTINATION, start=i + 2, image=image))
            return i + 2
        return i + 1

    def _angle(self, i: int, end: int) -> int:
        """Skip autolinks and inline tags so their contents stay literal."""
        follower = self._text[i + 1 : i + 2]
        if not (follower.isalpha() or follower in ("/", "!")):
            return i + 1
        close = self._text.find(">", i, end)
        return i + 1 if close == -1 else close + 1

    # -- Literal content ------------------------------------------------------

    def _literal(self, entry: Entry, i: int, end: int) -> int:
        text = self._text
        match entry.kind:
            case Kind.CODE:
                while i < end:
                    if text[i] != "`":
                        i += 1
                        continue
                    run = run_length(text, i, "`")
                    if run == entry.length:
                        self._stack.pop()
                        return i + run
                    i += run
                return end
            case Kind.MATH:
                while i < end:
                    if text[i] == "\\":
                        i += 2
                    elif text[i] == "$":
                        self._stack.pop()
                        return i + 1
                    else:
                        i += 1
                return end
            case Kind.DISPLAY_MATH:
                close = text.find("$$", i, end)
                if close == -1:
                    return end
                self._stack.pop()
                return close + 2
            case Kind.FOOTNOTE:
                while i < end:
                    c = text[i]
                    if c == "]":
                        self._stack.pop()
                        return i + 1
                    if c in " \t,[":
                        # Not a footnote label; the brackets are plain text
                        self._stack.pop()
                        return i
                    i += 1
                return end
            case _:
                return self._destination(entry, i, end)

    def _destination(self, entry: Entry, i: int, end: int) -> int:
        text = self._text
        while i < end:
            c = text[i]
            if entry.quote is not None:
                if c == entry.quote:
                    entry.quote = None
                i += 1
            elif c == "\\":
                entry.filled = True
                i += 2
            elif c.isspace():
                entry.spaced = entry.filled
                i += 1
            elif c == ")":
                if entry.depth:
                    entry.depth -= 1
                    i += 1
                else:
                    self._stack.pop()
                    return i + 1
            elif entry.spaced:
                if c not in _TITLE_QUOTES:
                    # Text after the target: this was never a link
                    self._stack.pop()
                    return i
                entry.quote = c
                i += 1
            else:
                if c == "(":
                    entry.depth += 1
                entry.filled = True
                i += 1
        return end

    # -- Closers --------------------------------------------------------------

    def closers(self) -> str:
        """Closing markers for every open entry, most recently opened first."""
        text = self._text
        trailing = len(text) - len(text.rstrip("\\"))
        if trailing % 2:
            # A dangling backslash would escape whatever comes next
            return ""

        suffix = ""
        last = text[-1:]
        linked = False
        for entry in reversed(self._stack):
            closer = ""
            match entry.kind:
                case Kind.EMPHASIS:
                    if is_whitespace(last):
                        continue
                    closer = entry.marker * entry.length
                case Kind.STRIKE | Kind.SUB | Kind.SUP:
                    # A closer merged into an adjacent run would change its length
                    if is_whitespace(last) or last == entry.marker[0]:
                        continue
                    closer = entry.marker
                case Kind.CODE:
                    if not text[entry.start :].strip():
                        continue
                    closer = "`" * entry.length
                    if last == "`":
                        closer = " " + closer
                case Kind.MATH | Kind.DISPLAY_MATH:
                    if is_whitespace(last) or not text[entry.start :].strip():
                        break
                    closer = entry.marker
                case Kind.FOOTNOTE:
                    label = text[entry.start :]
                    closer = "]" if label else f"{INCOMPLETE_FOOTNOTE}]"
                case Kind.BRACKET:
                    if linked:
                        continue
                    linked = True
                    if text[entry.start :].strip() in _TASK_MARKERS:
                        continue
                    target = INCOMPLETE_IMAGE if entry.image else INCOMPLETE_LINK
                    closer = f"]({target})"
                case Kind.DESTINATION:
                    if linked:
                        continue
                    linked = True
                    if entry.quote is not None:
                        closer = entry.quote + ")"
                    elif not entry.filled:
                        closer = (INCOMPLETE_IMAGE if entry.image else INCOMPLETE_LINK) + ")"
                    else:
                        closer = ")" * (entry.depth + 1)
            suffix += closer
            last = closer[-1]
        return suffix

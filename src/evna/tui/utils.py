"""Text utilities for the input engine: width measurement, tabs, char classes.

Display widths follow the terminal: wide CJK and emoji graphemes take two
columns, control and combining characters take none. Character classes used
by word motion are ASCII-only on purpose (see ``is_word_char``).
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# SGR and other CSI sequences emitted by the renderer
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*[mGKHJ]")

# Word characters for word motion and word deletion
_WORD_CHAR_RE = re.compile(r"[A-Za-z0-9_]")

# Leading indentation run
_INDENT_RE = re.compile(r"^[\t ]*")

# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return 2
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first = g[0]
    if ord(first) >= 0x1F000:
        return 2
    if unicodedata.category(first).startswith("M"):
        return 0
    return max(_wcwidth.wcwidth(first), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI escape sequences are ignored. Tabs must be expanded by the caller
    (see ``expand_tabs``); a literal tab counts as zero columns here.
    """
    if not text:
        return 0

    stripped = _ANSI_RE.sub("", text)
    if not stripped:
        return 0

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = 0
    for g in grapheme.graphemes(stripped):
        total += _grapheme_width(g)
    return _cache_width(stripped, total)


def take_columns(text: str, max_cols: int) -> str:
    """Return the longest prefix of plain *text* that fits in *max_cols* columns.

    Cuts at grapheme boundaries so a wide character is never split.
    """
    if max_cols <= 0:
        return ""
    if visible_width(text) <= max_cols:
        return text

    result: list[str] = []
    cols = 0
    for g in grapheme.graphemes(text):
        w = _grapheme_width(g)
        if cols + w > max_cols:
            break
        result.append(g)
        cols += w
    return "".join(result)


# ---------------------------------------------------------------------------
# Tabs and indentation
# ---------------------------------------------------------------------------


def expand_tabs(text: str, tab_width: int = 2) -> str:
    """Replace every tab with ``tab_width`` spaces.

    This is a fixed-width replacement, not tab stops: the expanded length of
    a prefix does not depend on the column it starts at.
    """
    if "\t" not in text:
        return text
    return text.replace("\t", " " * max(0, tab_width))


def leading_indent(text: str) -> str:
    """Return the run of spaces and tabs at the start of *text*."""
    match = _INDENT_RE.match(text)
    return match.group(0) if match else ""


# ---------------------------------------------------------------------------
# Character classification
# ---------------------------------------------------------------------------


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is whitespace."""
    return bool(char) and char.isspace()


def is_word_char(char: str) -> bool:
    """Return ``True`` if *char* is an ASCII word character (``[A-Za-z0-9_]``).

    Letters outside ASCII are deliberately not word characters, so word
    motion treats ``"café"`` as the word ``"caf"`` followed by ``"é"``.
    """
    return bool(char) and bool(_WORD_CHAR_RE.match(char))


def split_lines(text: str) -> list[str]:
    """Split *text* on newlines, normalising ``\\r\\n`` and ``\\r`` first.

    Always returns at least one line.
    """
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return normalized.split("\n")

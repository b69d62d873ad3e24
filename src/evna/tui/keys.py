"""Key events and key identifiers.

A ``KeyEvent`` is what the input consumes: a key name plus modifier flags
and, for text-producing keys, the characters typed. Key identifiers such as
``"ctrl+shift+left"`` name a chord; ``matches_key`` compares an event with
one. ``parse_key_event`` decodes raw terminal input (legacy escape
sequences, control bytes, ESC-prefixed Alt keys, kitty CSI-u) into events
for hosts that read stdin directly.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

KeyId = str

MODIFIER_NAMES: tuple[str, ...] = ("ctrl", "shift", "alt", "meta")

# Alternative spellings accepted in key identifiers and event names
KEY_NAME_ALIASES: dict[str, str] = {
    "return": "enter",
    "esc": "escape",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "del": "delete",
    "option": "alt",
    "cmd": "meta",
    "super": "meta",
}


def normalize_key_name(name: str) -> str:
    # Printable keys keep their case; named keys are case-insensitive.
    if len(name) == 1:
        return name
    lowered = name.lower()
    return KEY_NAME_ALIASES.get(lowered, lowered)


# ---------------------------------------------------------------------------
# KeyEvent
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class KeyEvent:
    name: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False
    sequence: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", normalize_key_name(self.name))

    @property
    def modifiers(self) -> frozenset[str]:
        return frozenset(
            name for name, flag in zip(MODIFIER_NAMES, (self.ctrl, self.shift, self.alt, self.meta)) if flag
        )

    @property
    def key_id(self) -> KeyId:
        """Canonical identifier, modifiers in ctrl, shift, alt, meta order."""
        prefix = "".join(f"{m}+" for m in MODIFIER_NAMES if m in self.modifiers)
        return prefix + self.name

    @property
    def is_printable(self) -> bool:
        """``True`` if the event carries text to insert."""
        if self.ctrl or self.meta or not self.sequence:
            return False
        return all(ord(ch) >= 32 and ord(ch) != 0x7F and not 0x80 <= ord(ch) <= 0x9F for ch in self.sequence)

    @classmethod
    def from_key_id(cls, key_id: KeyId, sequence: str | None = None) -> KeyEvent:
        """Build an event from an identifier like ``"ctrl+z"``."""
        modifiers, name = parse_key_id(key_id)
        if sequence is None and not ({"ctrl", "meta"} & modifiers):
            if name == "space":
                sequence = " "
            elif len(name) == 1:
                sequence = name.upper() if "shift" in modifiers and name.isalpha() else name
        return cls(
            name=name,
            ctrl="ctrl" in modifiers,
            shift="shift" in modifiers,
            alt="alt" in modifiers,
            meta="meta" in modifiers,
            sequence=sequence,
        )

    @classmethod
    def char(cls, text: str) -> KeyEvent:
        """Event for typed text (a single character or a burst of them)."""
        if text == " ":
            return cls(name="space", sequence=text)
        if len(text) == 1:
            lowered = text.lower()
            return cls(name=lowered, shift=text != lowered, sequence=text)
        return cls(name="", sequence=text)


# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------


def parse_key_id(key_id: KeyId) -> tuple[frozenset[str], str]:
    """Split ``"ctrl+shift+left"`` into modifiers and the key name.

    A trailing ``+`` names the plus key itself (``"ctrl++"``).
    """
    if key_id.endswith("++"):
        head, name = key_id[:-2], "+"
    elif key_id == "+":
        head, name = "", "+"
    else:
        head, _, name = key_id.rpartition("+")
    modifiers: set[str] = set()
    for part in filter(None, head.split("+")):
        modifier = KEY_NAME_ALIASES.get(part.lower(), part.lower())
        if modifier in MODIFIER_NAMES:
            modifiers.add(modifier)
    return frozenset(modifiers), normalize_key_name(name)


def matches_key(event: KeyEvent, key_id: KeyId) -> bool:
    """Check whether *event* is exactly the chord named by *key_id*."""
    modifiers, name = parse_key_id(key_id)
    event_name = event.name.lower() if len(event.name) == 1 else event.name
    if event_name != (name.lower() if len(name) == 1 else name):
        return False
    return event.modifiers == modifiers


# ---------------------------------------------------------------------------
# Raw terminal decoding
# ---------------------------------------------------------------------------

# Unmodified legacy sequences -> key names
LEGACY_KEY_SEQUENCES: dict[str, str] = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1b[H": "home",
    "\x1b[F": "end",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1b[1~": "home",
    "\x1b[2~": "insert",
    "\x1b[3~": "delete",
    "\x1b[4~": "end",
    "\x1b[5~": "pageup",
    "\x1b[6~": "pagedown",
    "\x1b[7~": "home",
    "\x1b[8~": "end",
}

_CSI_LETTER_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
}

_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageup",
    6: "pagedown",
    7: "home",
    8: "end",
}

_CSI_U_KEYS: dict[int, str] = {
    9: "tab",
    13: "enter",
    27: "escape",
    32: "space",
    127: "backspace",
    57414: "enter",  # keypad enter
}

# ESC [ 1 ; <mod> <letter>
_CSI_MOD_LETTER_RE = re.compile(r"^\x1b\[1;(\d+)([ABCDHF])$")
# ESC [ <code> ; <mod> ~
_CSI_MOD_TILDE_RE = re.compile(r"^\x1b\[(\d+);(\d+)~$")
# ESC [ <codepoint> [: ...] [; <mod>] u   (kitty keyboard protocol)
_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::\d*)*(?:;(\d+)(?::\d+)?)?u$")
# ESC [ 27 ; <mod> ; <keycode> ~   (xterm modifyOtherKeys)
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")

_MOD_SHIFT = 1
_MOD_ALT = 2
_MOD_CTRL = 4
_MOD_META = 8
_LOCK_MASK = 64 + 128


def _modified_event(name: str, modifier_param: int, sequence: str) -> KeyEvent:
    bits = (modifier_param - 1) & ~_LOCK_MASK if modifier_param > 0 else 0
    return KeyEvent(
        name=name,
        shift=bool(bits & _MOD_SHIFT),
        alt=bool(bits & _MOD_ALT),
        ctrl=bool(bits & _MOD_CTRL),
        meta=bool(bits & _MOD_META),
        sequence=sequence,
    )


def _codepoint_event(codepoint: int, modifier_param: int, data: str) -> KeyEvent | None:
    name = _CSI_U_KEYS.get(codepoint)
    if name is None:
        if codepoint < 32:
            return None
        try:
            name = chr(codepoint).lower()
        except (ValueError, OverflowError):
            return None
    event = _modified_event(name, modifier_param, data)
    if event.ctrl or event.meta:
        return event
    if name == "space":
        return KeyEvent(name=name, shift=event.shift, alt=event.alt, sequence=" ")
    if len(name) == 1:
        text = name.upper() if event.shift and name.isalpha() else name
        return KeyEvent(name=name, shift=event.shift, alt=event.alt, sequence=text)
    return event


def parse_key_event(data: str) -> KeyEvent | None:  # noqa: C901
    """Decode one chunk of raw terminal input into a ``KeyEvent``.

    Returns ``None`` for empty input and for sequences that are not keys
    (mouse reports, unknown CSI sequences).
    """
    if not data:
        return None

    name = LEGACY_KEY_SEQUENCES.get(data)
    if name is not None:
        return KeyEvent(name=name, sequence=data)

    match = _CSI_MOD_LETTER_RE.match(data)
    if match:
        return _modified_event(_CSI_LETTER_KEYS[match.group(2)], int(match.group(1)), data)

    match = _MODIFY_OTHER_KEYS_RE.match(data)
    if match:
        return _codepoint_event(int(match.group(2)), int(match.group(1)), data)

    match = _CSI_MOD_TILDE_RE.match(data)
    if match:
        key = _CSI_TILDE_KEYS.get(int(match.group(1)))
        if key is None:
            return None
        return _modified_event(key, int(match.group(2)), data)

    match = _CSI_U_RE.match(data)
    if match:
        return _codepoint_event(int(match.group(1)), int(match.group(2) or 1), data)

    if data == "\x1b[Z":
        return KeyEvent(name="tab", shift=True, sequence=data)

    # Single-byte keys
    if data == "\x1b":
        return KeyEvent(name="escape", sequence=data)
    if data in ("\r", "\n"):
        return KeyEvent(name="enter", sequence=data)
    if data == "\t":
        return KeyEvent(name="tab", sequence=data)
    if data in ("\x7f", "\x08"):
        return KeyEvent(name="backspace", sequence=data)
    if data == "\x00":
        return KeyEvent(name="space", ctrl=True, sequence=data)
    if len(data) == 1 and 1 <= ord(data) <= 26:
        return KeyEvent(name=chr(ord(data) + ord("a") - 1), ctrl=True, sequence=data)

    # Alt + key (ESC prefix)
    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key_event(data[1])
        if inner is None or inner.alt:
            return None
        return KeyEvent(
            name=inner.name,
            ctrl=inner.ctrl,
            shift=inner.shift,
            alt=True,
            meta=inner.meta,
            sequence=data,
        )

    if data.startswith("\x1b"):
        return None

    if len(data) == 1:
        return KeyEvent.char(data)
    return KeyEvent(name="", sequence=data)

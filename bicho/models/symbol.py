"""The fixed table of animal symbols."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Symbol:
    index: int
    name: str
    glyph: str


_ANIMALS: tuple[tuple[str, str], ...] = (
    ("Ostrich", "🦩"),
    ("Eagle", "🦅"),
    ("Donkey", "🐴"),
    ("Horse", "🐎"),
    ("Goat", "🐐"),
    ("Cow", "🐄"),
    ("Ram", "🐏"),
    ("Camel", "🐪"),
    ("Snake", "🐍"),
    ("Rabbit", "🐇"),
    ("Tiger", "🐯"),
    ("Cat", "🐱"),
    ("Buffalo", "🐃"),
    ("Monkey", "🐒"),
    ("Dog", "🐶"),
    ("Pig", "🐖"),
    ("Goose", "🪿"),
    ("Deer", "🦌"),
    ("Lion", "🦁"),
    ("Elephant", "🐘"),
    ("Zebra", "🦓"),
    ("Bull", "🐂"),
    ("Bear", "🐻"),
    ("Deerhound", "🐕"),
    ("Ox", "🐂"),
)

SYMBOLS: tuple[Symbol, ...] = tuple(
    Symbol(index=i, name=name, glyph=glyph) for i, (name, glyph) in enumerate(_ANIMALS)
)
SYMBOL_COUNT = len(SYMBOLS)


def is_valid_symbol(index: int) -> bool:
    return 0 <= int(index) < SYMBOL_COUNT


def glyph_of(index: int) -> str:
    if not is_valid_symbol(index):
        return "❓"
    return SYMBOLS[int(index)].glyph

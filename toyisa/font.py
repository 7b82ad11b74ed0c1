"""Built-in 8x8 bitmap font for the printable ASCII characters."""

from __future__ import annotations

FIRST_CHAR = 0x20
LAST_CHAR = 0x7E
GLYPH_HEIGHT = 8

# One row per byte, most significant bit is the leftmost pixel.
_GLYPHS = (
    "00 00 00 00 00 00 00 00",  # space
    "00 00 18 18 18 18 00 18",  # !
    "00 00 24 24 00 00 00 00",  # "
    "00 00 24 7E 24 7E 24 00",  # #
    "00 08 3C 2A 3E 0A 1C 08",  # $
    "00 22 12 0C 18 24 22 00",  # %
    "00 10 2A 24 12 2A 24 00",  # &
    "00 00 0C 0C 00 00 00 00",  # '
    "00 00 08 1C 22 22 00 00",  # (
    "00 00 22 1C 08 08 00 00",  # )
    "00 00 00 1C 1C 00 00 00",  # *
    "00 00 00 08 3E 08 00 00",  # +
    "00 00 00 00 00 0C 08 10",  # ,
    "00 00 00 00 3E 00 00 00",  # -
    "00 00 00 00 00 0C 0C 00",  # .
    "00 00 04 08 10 20 00 00",  # /
    "00 3C 42 42 42 42 3C 00",  # 0
    "00 08 18 08 08 08 1C 00",  # 1
    "00 3C 02 3C 20 20 3E 00",  # 2
    "00 3C 02 1C 02 02 3C 00",  # 3
    "00 22 22 3E 02 02 02 00",  # 4
    "00 3E 20 3C 02 02 3C 00",  # 5
    "00 1C 20 3C 22 22 1C 00",  # 6
    "00 3E 02 04 08 10 10 00",  # 7
    "00 3C 22 3C 22 22 3C 00",  # 8
    "00 3C 22 3E 02 02 3C 00",  # 9
    "00 00 0C 0C 00 0C 0C 00",  # :
    "00 00 0C 0C 00 0C 08 10",  # ;
    "00 00 08 1C 22 00 00 00",  # <
    "00 00 00 3E 00 3E 00 00",  # =
    "00 00 22 1C 08 00 00 00",  # >
    "00 3C 02 04 08 00 08 00",  # ?
    "00 3C 22 3E 22 3E 20 1C",  # @
    "00 1C 22 3E 22 22 22 00",  # A
    "00 3C 22 3C 22 22 3C 00",  # B
    "00 3E 20 20 20 20 3E 00",  # C
    "00 3C 22 22 22 22 3C 00",  # D
    "00 3E 20 3C 20 20 3E 00",  # E
    "00 3E 20 3C 20 20 20 00",  # F
    "00 3E 20 20 26 22 3E 00",  # G
    "00 22 22 3E 22 22 22 00",  # H
    "00 1C 08 08 08 08 1C 00",  # I
    "00 0E 04 04 04 24 18 00",  # J
    "00 22 24 38 24 22 22 00",  # K
    "00 20 20 20 20 20 3E 00",  # L
    "00 22 36 2A 22 22 22 00",  # M
    "00 22 32 2A 26 22 22 00",  # N
    "00 1C 22 22 22 22 1C 00",  # O
    "00 3C 22 3C 20 20 20 00",  # P
    "00 1C 22 22 22 2A 1C 04",  # Q
    "00 3C 22 3C 24 22 22 00",  # R
    "00 3E 20 3C 02 02 3C 00",  # S
    "00 3E 08 08 08 08 08 00",  # T
    "00 22 22 22 22 22 1C 00",  # U
    "00 22 22 22 22 14 08 00",  # V
    "00 22 22 2A 2A 36 22 00",  # W
    "00 22 22 14 08 14 22 00",  # X
    "00 22 22 14 08 08 08 00",  # Y
    "00 3E 02 04 08 10 3E 00",  # Z
    "00 00 1C 10 10 10 1C 00",  # [
    "00 00 20 10 08 04 02 00",  # backslash
    "00 00 38 08 08 08 38 00",  # ]
    "00 00 08 14 22 00 00 00",  # ^
    "00 00 00 00 00 00 00 3E",  # _
    "00 00 04 08 10 00 00 00",  # `
    "00 00 00 1C 22 3C 24 00",  # a
    "00 20 20 3C 22 22 3C 00",  # b
    "00 00 00 3C 20 20 3C 00",  # c
    "00 04 04 3C 24 24 3C 00",  # d
    "00 00 00 3C 22 3E 20 00",  # e
    "00 0C 12 1C 10 10 10 00",  # f
    "00 00 00 3C 24 24 3C 04",  # g
    "00 20 20 3C 22 22 22 00",  # h
    "00 00 08 00 18 08 08 00",  # i
    "00 00 08 00 18 08 08 10",  # j
    "00 20 24 38 24 24 22 00",  # k
    "00 00 18 08 08 08 1C 00",  # l
    "00 00 00 36 2A 2A 2A 00",  # m
    "00 00 00 3C 22 22 22 00",  # n
    "00 00 00 1C 22 22 1C 00",  # o
    "00 00 00 3C 22 3C 20 20",  # p
    "00 00 00 3C 24 3C 04 04",  # q
    "00 00 00 1C 20 20 20 00",  # r
    "00 00 00 3E 20 3E 02 00",  # s
    "00 00 08 1C 08 08 12 00",  # t
    "00 00 00 22 22 22 1C 00",  # u
    "00 00 00 22 22 14 08 00",  # v
    "00 00 00 2A 2A 2A 14 00",  # w
    "00 00 00 22 14 14 08 00",  # x
    "00 00 00 22 22 1C 04 08",  # y
    "00 00 00 3E 04 08 3E 00",  # z
    "00 00 08 1C 22 22 1C 08",  # {
    "00 00 08 08 1C 08 08 08",  # |
    "00 00 22 1C 08 1C 22 00",  # }
    "00 00 00 12 3C 00 00 00",  # ~
)

FONT_DATA: bytes = bytes.fromhex(" ".join(_GLYPHS))


def glyph(code: int | str) -> bytes:
    """Return the eight row bytes of a printable ASCII character.

    ``code`` is a character code or a one-character string; anything
    outside 0x20-0x7E raises ValueError.
    """
    if isinstance(code, str):
        if len(code) != 1:
            raise ValueError(f"expected a single character, got {code!r}")
        code = ord(code)
    if not FIRST_CHAR <= code <= LAST_CHAR:
        raise ValueError(f"no glyph for character code 0x{code:X}")
    offset = (code - FIRST_CHAR) * GLYPH_HEIGHT
    return FONT_DATA[offset : offset + GLYPH_HEIGHT]
"""Spreadsheet column labelling helpers."""

_ALPHABET_SIZE = 26


def column_letter(col: int) -> str:
    """Convert a 1-based column number to its spreadsheet letter label.

    Uses bijective base-26 numeration (no zero digit): 1 -> "A", 26 -> "Z",
    27 -> "AA", 702 -> "ZZ", 703 -> "AAA". Column numbers below 1 have no
    label and yield an empty string.
    """
    letters: list[str] = []
    while col > 0:
        col -= 1
        letters.append(chr(ord("A") + col % _ALPHABET_SIZE))
        col //= _ALPHABET_SIZE
    return "".join(reversed(letters))


def cell_address(row: int, col: int) -> str:
    """Return the A1-style address of a 1-based (row, col) position."""
    return f"{column_letter(col)}{row}"

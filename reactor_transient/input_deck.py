"""
Input deck reader.

Reads the plain-text transient input file:

    T                      <- is the core thermal? (Fortran-style logical)
    0.0   0.0     0.0      <- time [s]  reactivity [Δk/k]  source [n/s]
    10.0  0.5E-3  1.0D2
    ...

Values on a data line may be separated by whitespace or commas. As with a
Fortran list-directed read, only the first three values of a row are used and
the rest of the line is ignored. Text after '!' is a comment; blank lines and
lines starting with '#' are ignored. At least two data rows are required.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from reactor_transient.exceptions import InsufficientDataError, MalformedRowError
from reactor_transient.table import TimeSeriesTable

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"
TRAILING_COMMENT = "!"
VALUES_PER_ROW = 3

_SEPARATOR = re.compile(r"[,\s]+")
_FORTRAN_EXPONENT = re.compile(r"(?<=[0-9.])[dD](?=[+-]?[0-9])")


@dataclass(frozen=True)
class InputDeck:
    """Contents of a transient input file."""
    is_thermal: bool
    table: TimeSeriesTable
    source_path: Optional[Path] = None


def parse_logical(text: str) -> bool:
    """Parse a Fortran list-directed logical value.

    Accepts an optional leading period followed by T or F (any case), with
    anything after that letter ignored, e.g. ``T``, ``.TRUE.``, ``false``.
    ``1`` and ``0`` are accepted as well.

    Raises:
        ValueError: If the text is not a logical value
    """
    token = text.strip().split(maxsplit=1)[0] if text.strip() else ""
    if token in ("1", "0"):
        return token == "1"
    letter = token[1:2] if token.startswith(".") else token[:1]
    letter = letter.lower()
    if letter == "t":
        return True
    if letter == "f":
        return False
    raise ValueError(f"not a logical value: {text!r}")


def parse_real(text: str) -> float:
    """Parse a real number, accepting Fortran D exponents (1.0D-3)."""
    return float(_FORTRAN_EXPONENT.sub("e", text))


def _data_lines(lines: Iterable[str]):
    """Yield (line_number, stripped_line) for lines that carry content."""
    for number, raw in enumerate(lines, start=1):
        line = raw.split(TRAILING_COMMENT, 1)[0].strip()
        if not line or line.startswith(COMMENT_PREFIX):
            continue
        yield number, line


def _parse_row(number: int, line: str, source: Optional[str]) -> Tuple[float, float, float]:
    fields = [f for f in _SEPARATOR.split(line) if f]
    if len(fields) < VALUES_PER_ROW:
        raise MalformedRowError(number, line, f"expected 3 values, found {len(fields)}", source)
    try:
        time, reactivity, strength = (parse_real(f) for f in fields[:VALUES_PER_ROW])
    except ValueError:
        raise MalformedRowError(number, line, "non-numeric value", source)
    return time, reactivity, strength


def parse_input_deck(lines: Iterable[str], source: Optional[Union[str, Path]] = None) -> InputDeck:
    """Parse input deck text.

    Args:
        lines: Lines of the input file
        source: Name used in error messages and kept as the deck's source path

    Returns:
        InputDeck with the spectrum flag and the time-series table

    Raises:
        MalformedRowError: If the flag line or a data row cannot be parsed
        InsufficientDataError: If fewer than two data rows are present
        InvalidTableError: If the times are not strictly increasing
    """
    label = str(source) if source is not None else None
    content = _data_lines(lines)

    header = next(content, None)
    if header is None:
        raise InsufficientDataError(0, label)

    number, line = header
    try:
        is_thermal = parse_logical(line)
    except ValueError:
        raise MalformedRowError(number, line, "expected spectrum flag (T/F)", label)
    logger.debug(f"Thermal spectrum problem? {is_thermal}")

    rows: List[Tuple[float, float, float]] = []
    for number, line in content:
        row = _parse_row(number, line, label)
        logger.debug(f"input data: {len(rows) + 1} {row[0]} {row[1]} {row[2]}")
        rows.append(row)

    logger.debug(f"There appear to be {len(rows)} state points in {label or 'input'}")
    if len(rows) < 2:
        raise InsufficientDataError(len(rows), label)

    table = TimeSeriesTable.build(rows)
    return InputDeck(
        is_thermal=is_thermal,
        table=table,
        source_path=Path(source) if source is not None else None,
    )


def load_input_deck(path: Union[str, Path]) -> InputDeck:
    """Read an input deck from disk.

    Raises:
        FileNotFoundError: If the file doesn't exist
        MalformedRowError: If the flag line or a data row cannot be parsed
        InsufficientDataError: If fewer than two data rows are present
        InvalidTableError: If the times are not strictly increasing
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Input data file does not exist: {path}")

    logger.debug(f"Reading input from file: {path}")
    with open(path, "r") as f:
        return parse_input_deck(f, source=path)

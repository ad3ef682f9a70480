"""Quote-aware CSV tokenizer shared by the bill and sheet extractors.

Implements the subset of RFC 4180 that spreadsheet and utility exports
actually use: quoted fields, embedded commas and line breaks inside quotes,
and doubled-quote escaping. No trimming or type coercion happens here.
"""

import logging

logger = logging.getLogger(__name__)


def tokenize(text: str) -> list[list[str]]:
    """Split raw CSV text into rows of string fields.

    Args:
        text: Decoded CSV text with any newline convention (LF, CR or CRLF)

    Returns:
        Rows in source order, each a list of fields in source order

    Examples:
        >>> tokenize('a,"b,c",d')
        [['a', 'b,c', 'd']]
        >>> tokenize('x,"a ""b"" c"')
        [['x', 'a "b" c']]
    """
    rows: list[list[str]] = []
    row: list[str] = []
    field: list[str] = []
    in_quotes = False
    # True once anything (a character or a quote) was read since the last row break
    pending = False

    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if char == '"':
            if in_quotes and i + 1 < length and text[i + 1] == '"':
                field.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
            pending = True
        elif char == "," and not in_quotes:
            row.append("".join(field))
            field = []
            pending = True
        elif char in "\r\n" and not in_quotes:
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            row.append("".join(field))
            rows.append(row)
            field = []
            row = []
            pending = False
        else:
            field.append(char)
            pending = True
        i += 1

    if pending:
        row.append("".join(field))
        rows.append(row)

    if in_quotes:
        logger.debug("CSV text ended inside a quoted field; keeping the partial field")
    return rows


def is_blank_row(row: list[str]) -> bool:
    """Return True when every field of the row is empty after trimming."""
    return all(not cell.strip() for cell in row)

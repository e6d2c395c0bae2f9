import logging
import re
from collections import namedtuple

logger = logging.getLogger(__name__)

DIGITS = "0123456789"

# Summary of one decode run. The pattern itself is never stored.
DecodeSummary = namedtuple("DecodeSummary", ["activations", "width", "height"])


class MalformedPatternError(ValueError):
    """Raised when a pattern line contains a character outside the RLE subset."""

    def __init__(self, character, line_number, column):
        self.character = character
        self.line_number = line_number
        self.column = column
        super().__init__(
            f"illegal character {character!r} at line {line_number}, column {column}; "
            "only digits, 'b', 'o', '$' and '!' are understood"
        )


def parse_header(line):
    """
    Parses an 'x = 3, y = 3, rule = B3/S23' header into a dict of strings.
    Fragments without '=' are dropped, the header is informational only.
    """
    fields = {}
    for fragment in line.split(','):
        match = re.match(r'\s*(\w+)\s*=\s*(\S+)\s*$', fragment)
        if match:
            fields[match.group(1)] = match.group(2)
    return fields


def decode_rle(stream, target):
    """
    Reads an RLE pattern line by line and calls target.activate(x, y) for
    every live cell, in the order the cells appear in the text.

    'stream' is any iterable of lines (open file, sys.stdin, list); a str is
    split into lines first. Decoding stops at '!' or at the end of input.

    Raises MalformedPatternError on the first character it does not know,
    after which no further cells are activated.
    """
    if isinstance(stream, str):
        stream = stream.splitlines()

    x, y = 0, 0          # cursor
    pending = 0          # repeat count accumulated from digits so far
    activations = 0
    width, height = 0, 0

    for line_number, raw_line in enumerate(stream, start=1):
        # Header and comment lines are checked before trimming
        if raw_line.startswith('x'):
            logger.debug("Pattern header: %s", parse_header(raw_line))
            continue
        if raw_line.startswith('#'):
            continue

        line = raw_line.strip()
        for column, c in enumerate(line, start=1):
            if c in DIGITS:
                pending = 10 * pending + int(c)
                continue

            count = pending if pending > 0 else 1
            pending = 0

            if c == 'b':
                x += count
            elif c == 'o':
                for _ in range(count):
                    target.activate(x, y)
                    x += 1
                activations += count
                width = max(width, x)
                height = max(height, y + 1)
            elif c == '$':
                y += count
                x = 0
            elif c == '!':
                return DecodeSummary(activations, width, height)
            else:
                raise MalformedPatternError(c, line_number, column)

    return DecodeSummary(activations, width, height)


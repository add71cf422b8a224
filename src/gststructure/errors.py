"""Parse errors for structure and caps text

A single failure type is used for everything that can go wrong while reading
structure or caps text. It carries the offset at which the parser gave up and
a short excerpt of the input around that offset.
"""

# Characters of context kept on each side of the failing offset
EXCERPT_RADIUS = 20


class ParseError(Exception):
    """Structure or caps text could not be parsed"""
    def __init__(self, message: str, pos: int, input: str):
        self.message = message
        self.pos = pos
        self.input = input
        self.excerpt = input[max(0, pos - EXCERPT_RADIUS):pos + EXCERPT_RADIUS]
        super().__init__(f"{message} at position {pos}: ...{self.excerpt!r}...")

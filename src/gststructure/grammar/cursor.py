"""Position-tracked reader over structure and caps text"""

from gststructure.errors import ParseError


WHITESPACE = " \t\r\n"


class Cursor:
    """Reads the input one character at a time

    Every failure raised through the cursor carries the current offset.
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.length = len(source)

    @property
    def eof(self) -> bool:
        return self.pos >= self.length

    def peek(self, offset: int = 0) -> str:
        """Character at pos + offset, or '' past the end"""
        pos = self.pos + offset
        if pos >= self.length:
            return ""
        return self.source[pos]

    def consume(self) -> str:
        if self.pos >= self.length:
            return ""
        ch = self.source[self.pos]
        self.pos += 1
        return ch

    def remaining(self) -> str:
        return self.source[self.pos:]

    def skip_whitespace(self) -> None:
        """Skip whitespace and backslash-newline line continuations"""
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch in WHITESPACE:
                self.pos += 1
            elif ch == "\\" and self.peek(1) in ("\n", "\r"):
                self.pos += 2
                # \r\n is a single continuation
                if self.peek() == "\n" and self.source[self.pos - 1] == "\r":
                    self.pos += 1
            else:
                break

    def try_consume(self, literal: str) -> bool:
        if self.source.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def expect(self, literal: str) -> None:
        if not self.try_consume(literal):
            got = self.source[self.pos:self.pos + 10]
            self.fail(f"Expected '{literal}', got '{got}'")

    def fail(self, message: str):
        raise ParseError(message, self.pos, self.source)

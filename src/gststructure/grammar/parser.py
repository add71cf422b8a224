"""Recursive parser for structure and caps text

Grammar (whitespace and backslash-newline continuations allowed between
tokens):

    caps       := 'ANY' | 'EMPTY' | 'NONE' | entry (';' entry)* [';']
    entry      := name ['(' feature (',' feature)* ')'] fields
    structure  := name fields [';']
    fields     := (',' field_name '=' value)* [',']
    value      := '(' type_name ')' payload
                | '[' value ',' value [',' value] ']'
                | '{' [value (',' value)* [',']] '}'
                | '<' [value (',' value)* [',']] '>'
                | '"' quoted '"'
                | unquoted

An unquoted token ends at `, ; ] } >` or whitespace and is classified by
infer_type. A `(type)` tag routes the payload through interpret_typed, except
for the inline caps form `(GstCaps)[ ... ]` which is always parsed as caps.
"""

from contextlib import contextmanager
from string import ascii_letters, digits
from typing import Dict, List, Optional, Tuple

from gststructure.config import resolve_max_depth
from gststructure.errors import ParseError
from gststructure.grammar.coercion import CAPS_TYPES, interpret_typed
from gststructure.grammar.cursor import WHITESPACE, Cursor
from gststructure.grammar.inference import infer_type
from gststructure.types import (
    ArrayValue,
    Caps,
    CapsAny,
    CapsEmpty,
    CapsEntry,
    CapsStructures,
    CapsValue,
    ListValue,
    RangeValue,
    StringValue,
    Structure,
    Value,
)


NAME_START = frozenset(ascii_letters + "_")
NAME_CHARS = frozenset(ascii_letters + digits + "-_.:/")
FIELD_NAME_CHARS = frozenset(ascii_letters + digits + "-_")
TYPE_NAME_CHARS = frozenset(ascii_letters + digits + "_")
FEATURE_NAME_CHARS = frozenset(ascii_letters + digits + ":_-")

UNQUOTED_TERMINATORS = frozenset(",;]}>" + WHITESPACE)

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    '"': '"',
    "\\": "\\",
}


class Parser(Cursor):
    """Parser for one structure or caps string

    A parser is single-use: create one per input. `depth` is the nesting
    level the input starts at, so payloads parsed out of strings count
    against the same limit as their enclosing text.
    """

    def __init__(self, source: str, max_depth: Optional[int] = None, depth: int = 0):
        super().__init__(source)
        self.max_depth = resolve_max_depth(max_depth)
        self.depth = depth

    @contextmanager
    def _nested(self):
        self.depth += 1
        if self.depth > self.max_depth:
            self.fail(f"Maximum nesting depth of {self.max_depth} exceeded")
        try:
            yield
        finally:
            self.depth -= 1

    # =========================================================================
    # NAMES
    # =========================================================================

    def parse_name(self) -> str:
        """Structure or caps name, e.g. video/x-raw"""
        start = self.pos
        ch = self.peek()
        if ch not in NAME_START:
            self.fail(f"Expected name starting with a letter, got '{ch}'")
        while self.pos < self.length and self.source[self.pos] in NAME_CHARS:
            self.pos += 1
        return self.source[start:self.pos]

    def parse_field_name(self) -> str:
        """Field name, allowing element::property and element.pad::property"""
        start = self.pos
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch in FIELD_NAME_CHARS or ch == ".":
                self.pos += 1
            elif ch == ":" and self.peek(1) == ":":
                self.pos += 2
            else:
                break
        name = self.source[start:self.pos]
        if not name:
            self.fail("Expected field name")
        return name

    def parse_type_name(self) -> str:
        start = self.pos
        while self.pos < self.length and self.source[self.pos] in TYPE_NAME_CHARS:
            self.pos += 1
        return self.source[start:self.pos]

    def parse_feature_name(self) -> str:
        start = self.pos
        while self.pos < self.length and self.source[self.pos] in FEATURE_NAME_CHARS:
            self.pos += 1
        name = self.source[start:self.pos]
        if not name:
            self.fail("Expected capability feature name")
        return name

    # =========================================================================
    # VALUES
    # =========================================================================

    def parse_value(self) -> Value:
        ch = self.peek()
        if ch == "(":
            return self.parse_typed_value()
        if ch == "[":
            return self.parse_range()
        if ch == "{":
            return ListValue(self._parse_sequence("{", "}"))
        if ch == "<":
            return ArrayValue(self._parse_sequence("<", ">"))
        if ch == '"':
            return StringValue(self.parse_quoted_string())
        return self.parse_unquoted()

    def parse_typed_value(self) -> Value:
        with self._nested():
            self.expect("(")
            self.skip_whitespace()
            type_name = self.parse_type_name()
            if not type_name:
                self.fail("Expected type name inside (...)")
            self.skip_whitespace()
            self.expect(")")
            self.skip_whitespace()

            if type_name.lower() in CAPS_TYPES and self.peek() == "[":
                return CapsValue(self._parse_inline_caps())

            ch = self.peek()
            if ch == '"':
                raw = StringValue(self.parse_quoted_string())
            elif ch == "[":
                raw = self.parse_range()
            elif ch == "{":
                raw = ListValue(self._parse_sequence("{", "}"))
            elif ch == "<":
                raw = ArrayValue(self._parse_sequence("<", ">"))
            else:
                raw = self.parse_unquoted()

            return interpret_typed(type_name, raw, self.max_depth, self.depth)

    def _parse_inline_caps(self) -> Caps:
        """Parse the body of (GstCaps)[ ... ] as caps"""
        start = self.pos
        body = self.extract_balanced("[", "]")
        try:
            return Parser(body, max_depth=self.max_depth, depth=self.depth).parse_caps()
        except ParseError as e:
            self.pos = start
            self.fail(f"Failed to parse caps: {e.message}")

    def extract_balanced(self, open: str, close: str) -> str:
        """Return the text up to the close bracket matching the current one

        Nested open/close pairs are tracked by depth. Brackets inside quoted
        strings do not count.
        """
        self.expect(open)
        start = self.pos
        depth = 1
        while self.pos < self.length:
            ch = self.source[self.pos]
            if ch == '"':
                self._skip_quoted()
                continue
            if ch == open:
                depth += 1
            elif ch == close:
                depth -= 1
                if depth == 0:
                    break
            self.pos += 1
        content = self.source[start:self.pos]
        self.expect(close)
        return content

    def _skip_quoted(self) -> None:
        self.pos += 1
        while self.pos < self.length and self.source[self.pos] != '"':
            if self.source[self.pos] == "\\":
                self.pos += 1
            self.pos += 1
        self.pos = min(self.pos + 1, self.length)

    def parse_range(self) -> RangeValue:
        with self._nested():
            self.expect("[")
            self.skip_whitespace()
            min_value = self.parse_value()
            self.skip_whitespace()
            self.expect(",")
            self.skip_whitespace()
            max_value = self.parse_value()
            self.skip_whitespace()

            step = None
            if self.peek() == ",":
                self.pos += 1
                self.skip_whitespace()
                step = self.parse_value()
                self.skip_whitespace()

            self.expect("]")
            return RangeValue(min_value, max_value, step)

    def _parse_sequence(self, open: str, close: str) -> Tuple[Value, ...]:
        """Comma-separated values between open and close, trailing comma allowed"""
        with self._nested():
            self.expect(open)
            items: List[Value] = []
            self.skip_whitespace()
            while not self.eof and self.peek() != close:
                items.append(self.parse_value())
                self.skip_whitespace()
                if self.peek() == ",":
                    self.pos += 1
                    self.skip_whitespace()
                elif self.peek() != close:
                    self.fail(f"Expected ',' or '{close}'")
            self.expect(close)
            return tuple(items)

    def parse_quoted_string(self) -> str:
        """Decode a double-quoted string

        Unknown escapes are kept verbatim with their backslash.
        """
        start = self.pos
        self.expect('"')
        chars: List[str] = []
        while not self.eof and self.peek() != '"':
            ch = self.consume()
            if ch == "\\":
                esc = self.consume()
                chars.append(ESCAPES.get(esc, "\\" + esc))
            else:
                chars.append(ch)
        if self.eof:
            self.pos = start
            self.fail("Unterminated quoted string")
        self.pos += 1
        return "".join(chars)

    def parse_unquoted(self) -> Value:
        start = self.pos
        while self.pos < self.length and self.source[self.pos] not in UNQUOTED_TERMINATORS:
            self.pos += 1
        raw = self.source[start:self.pos]
        if not raw:
            self.fail("Expected a value")
        return infer_type(raw)

    # =========================================================================
    # STRUCTURES AND CAPS
    # =========================================================================

    def parse_field(self) -> Tuple[str, Value]:
        name = self.parse_field_name()
        self.skip_whitespace()
        self.expect("=")
        self.skip_whitespace()
        return name, self.parse_value()

    def _parse_fields(self, consume_semicolon: bool) -> Dict[str, Value]:
        """Read `, name=value` pairs until a ';' or anything but a comma

        A repeated field name replaces the earlier value.
        """
        fields: Dict[str, Value] = {}
        while not self.eof:
            self.skip_whitespace()
            ch = self.peek()
            if ch == ";":
                if consume_semicolon:
                    self.pos += 1
                break
            if ch != ",":
                break

            self.pos += 1
            self.skip_whitespace()

            # Trailing comma
            if self.eof:
                break
            if self.peek() == ";":
                if consume_semicolon:
                    self.pos += 1
                break

            name, value = self.parse_field()
            fields[name] = value
        return fields

    def parse_structure(self) -> Structure:
        self.skip_whitespace()
        name = self.parse_name()
        return Structure(name, self._parse_fields(consume_semicolon=True))

    def _parse_features(self) -> List[str]:
        self.expect("(")
        self.skip_whitespace()
        features: List[str] = []
        while not self.eof and self.peek() != ")":
            features.append(self.parse_feature_name())
            self.skip_whitespace()
            if self.peek() == ",":
                self.pos += 1
                self.skip_whitespace()
        self.expect(")")
        return features

    def parse_caps(self) -> Caps:
        self.skip_whitespace()

        keyword = self.remaining().strip()
        if keyword == "ANY":
            self.pos = self.length
            return CapsAny()
        if keyword in ("EMPTY", "NONE"):
            self.pos = self.length
            return CapsEmpty()

        entries: List[CapsEntry] = []
        while not self.eof:
            self.skip_whitespace()
            if self.eof:
                break

            name = self.parse_name()
            self.skip_whitespace()
            features: List[str] = []
            if self.peek() == "(":
                features = self._parse_features()
            fields = self._parse_fields(consume_semicolon=False)
            entries.append(CapsEntry(Structure(name, fields), tuple(features)))

            self.skip_whitespace()
            if self.peek() == ";":
                self.pos += 1
            else:
                break

        if not entries:
            self.fail("Expected caps")
        return CapsStructures(tuple(entries))

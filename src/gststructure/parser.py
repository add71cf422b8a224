"""Public parse entry points

Every entry point comes in two forms: `*_or_throw` raises ParseError on the
first failure, the plain form returns None instead. Blank input (empty or
whitespace only) is rejected by both.
"""

import logging
from typing import Optional

from gststructure.errors import ParseError
from gststructure.grammar.parser import Parser
from gststructure.types import Caps, Structure

logger = logging.getLogger(__name__)


def parse_structure_or_throw(text: str, max_depth: Optional[int] = None) -> Structure:
    """Parse a structure string, raising ParseError if it is invalid

    Example:
        s = parse_structure_or_throw("seek, start=5.0, flags=flush+accurate")
        s.fields["start"]   # DoubleValue(5.0)
    """
    return Parser(text, max_depth=max_depth).parse_structure()


def parse_structure(text: str, max_depth: Optional[int] = None) -> Optional[Structure]:
    """Parse a structure string, returning None if it is invalid"""
    if not text or not text.strip():
        return None
    try:
        return parse_structure_or_throw(text, max_depth)
    except ParseError as e:
        logger.debug("Rejected structure %r: %s", text, e)
        return None


def parse_caps_or_throw(text: str, max_depth: Optional[int] = None) -> Caps:
    """Parse a caps string, raising ParseError if it is invalid

    Example:
        caps = parse_caps_or_throw("video/x-raw, format=I420; audio/x-raw, rate=44100")
        caps.entries[1].structure.name   # "audio/x-raw"
    """
    return Parser(text, max_depth=max_depth).parse_caps()


def parse_caps(text: str, max_depth: Optional[int] = None) -> Optional[Caps]:
    """Parse a caps string, returning None if it is invalid"""
    if not text or not text.strip():
        return None
    try:
        return parse_caps_or_throw(text, max_depth)
    except ParseError as e:
        logger.debug("Rejected caps %r: %s", text, e)
        return None

"""Cursor, type inference, coercion and the recursive parser"""

from gststructure.grammar.coercion import interpret_typed
from gststructure.grammar.cursor import Cursor
from gststructure.grammar.inference import infer_type
from gststructure.grammar.parser import Parser

__all__ = [
    "Cursor",
    "Parser",
    "infer_type",
    "interpret_typed",
]

"""Indexed access over parsed caps

GstCaps wraps a Caps and exposes its structures by position, each as a
GstStructure.

Example:
    caps = GstCaps.from_string("video/x-raw, format=I420; audio/x-raw, rate=44100")
    len(caps)                 # 2
    caps.at(0).name           # "video/x-raw"
    caps.at(1).get("rate")    # 44100
    [s.name for s in caps]    # ["video/x-raw", "audio/x-raw"]

    GstCaps.from_string("ANY").is_any      # True
    GstCaps.from_string("NONE").is_empty   # True
"""

from typing import Iterator, List, Tuple

from gststructure.grammar.parser import Parser
from gststructure.serializer import caps_to_string
from gststructure.structure import GstStructure
from gststructure.types import Caps, CapsAny, CapsEmpty, CapsEntry, CapsStructures


class GstCaps:
    """Caps with positional access to their structures"""

    def __init__(self, caps: Caps):
        self._caps = caps
        self._entries: Tuple[CapsEntry, ...] = caps.entries if isinstance(caps, CapsStructures) else ()

    @classmethod
    def from_string(cls, s: str) -> "GstCaps":
        """Parse a caps string

        Raises ParseError if the string is invalid.
        """
        return cls(Parser(s.strip()).parse_caps())

    @property
    def caps(self) -> Caps:
        return self._caps

    @property
    def is_any(self) -> bool:
        """True for ANY caps (matches everything)"""
        return isinstance(self._caps, CapsAny)

    @property
    def is_empty(self) -> bool:
        """True for EMPTY / NONE caps (matches nothing)"""
        return isinstance(self._caps, CapsEmpty)

    def at(self, index: int) -> GstStructure:
        """Structure at index

        Raises IndexError when out of range.
        """
        return GstStructure(self._entries[index].structure)

    def get_features(self, index: int) -> List[str]:
        """Capability features of the structure at index, [] when out of range"""
        if not -len(self._entries) <= index < len(self._entries):
            return []
        return list(self._entries[index].features)

    def to_string(self) -> str:
        return caps_to_string(self._caps)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GstStructure]:
        for entry in self._entries:
            yield GstStructure(entry.structure)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"GstCaps('{self.to_string()}')"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GstCaps):
            return False
        return self._caps == other._caps

    def __hash__(self) -> int:
        return hash(self._caps)

"""
Images: the named piles a move sequence reads and writes.

An image is an ordered list of (name, pile) entries. Entry order is kept
through every operation and is the order used for serialization. Images
are values: every operation returns a new image and leaves the receiver
unchanged, so evaluation steps never alias each other's state.

Author: xwest
"""

import json
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..config import MovesConfiguration
from .card import Card
from .errors import PileFormatError
from .pile import Pile


class Image:
    """Ordered collection of uniquely named piles."""

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[Tuple[str, Iterable[Card]]] = ()):
        seen = set()
        normalized: List[Tuple[str, Pile]] = []
        for name, cards in entries:
            if name in seen:
                raise ValueError(f"Duplicate pile name '{name}' in image")
            seen.add(name)
            pile = cards if isinstance(cards, Pile) else Pile(cards)
            normalized.append((name, pile))
        self._entries: Tuple[Tuple[str, Pile], ...] = tuple(normalized)

    @classmethod
    def _from_entries(cls, entries: Iterable[Tuple[str, Pile]]) -> "Image":
        image = cls.__new__(cls)
        image._entries = tuple(entries)
        return image

    # Queries

    def get(self, name: str) -> Optional[Pile]:
        for entry_name, pile in self._entries:
            if entry_name == name:
                return pile
        return None

    def names(self) -> List[str]:
        return [name for name, _ in self._entries]

    def items(self) -> List[Tuple[str, Pile]]:
        return list(self._entries)

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self._entries == other._entries

    def __hash__(self) -> int:
        return hash(self._entries)

    # Updates

    def put(self, name: str, cards: Iterable[Card]) -> "Image":
        """
        Put cards on top of the named pile.

        A missing pile is created at the end of the image, even when
        ``cards`` is empty.
        """
        cards = cards if isinstance(cards, Pile) else Pile(cards)
        entries = []
        found = False
        for entry_name, pile in self._entries:
            if entry_name == name:
                entries.append((entry_name, cards + pile))
                found = True
            else:
                entries.append((entry_name, pile))
        if not found:
            entries.append((name, cards))
        return Image._from_entries(entries)

    def set(self, name: str, cards: Iterable[Card]) -> "Image":
        """Replace the named pile's cards, keeping its position (empty piles stay)."""
        cards = cards if isinstance(cards, Pile) else Pile(cards)
        if name not in self:
            return Image._from_entries(self._entries + ((name, cards),))
        return Image._from_entries(
            (entry_name, cards if entry_name == name else pile)
            for entry_name, pile in self._entries
        )

    def take(self, name: str) -> Tuple[Optional[Pile], "Image"]:
        """Remove the named pile entirely, returning its cards (None if absent)."""
        taken: Optional[Pile] = None
        entries = []
        for entry_name, pile in self._entries:
            if entry_name == name:
                taken = pile
            else:
                entries.append((entry_name, pile))
        if taken is None:
            return None, self
        return taken, Image._from_entries(entries)

    def update(self, name: str, f: Callable[[Optional[Pile]], Optional[Pile]]) -> "Image":
        """
        Replace the named pile with ``f(current)``.

        ``f`` receives None for a missing pile. A result of None or an empty
        pile deletes the entry; anything else is stored, keeping the entry's
        position when it already existed.
        """
        result = f(self.get(name))
        if result is not None and not isinstance(result, Pile):
            result = Pile(result)

        if not result:
            _, image = self.take(name)
            return image

        entries = []
        found = False
        for entry_name, pile in self._entries:
            if entry_name == name:
                entries.append((entry_name, result))
                found = True
            else:
                entries.append((entry_name, pile))
        if not found:
            entries.append((name, result))
        return Image._from_entries(entries)

    # Serialization

    def to_dict(self, config: Optional[MovesConfiguration] = None) -> Dict[str, str]:
        """Ordered mapping of pile name to pile notation."""
        return {name: pile.to_string(config) for name, pile in self._entries}

    @classmethod
    def from_dict(cls, mapping: Mapping[str, str]) -> "Image":
        """Decode an ordered mapping; any bad pile fails the whole decode."""
        entries = []
        for name, text in mapping.items():
            if not isinstance(text, str):
                raise PileFormatError(
                    f"pile '{name}': expected notation string, got {type(text).__name__}",
                    pile_name=name
                )
            try:
                entries.append((name, Pile.from_string(text)))
            except PileFormatError as e:
                raise e.in_pile(name) from e
        return cls(entries)

    def to_json(self, config: Optional[MovesConfiguration] = None, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(config), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "Image":
        try:
            mapping = json.loads(text)
        except json.JSONDecodeError as e:
            raise PileFormatError(f"Invalid image JSON: {e.msg}") from e
        if not isinstance(mapping, dict):
            raise PileFormatError("Image JSON must be an object of pile name to notation")
        return cls.from_dict(mapping)

    def __repr__(self) -> str:
        inner = ", ".join(f"{name!r}: {len(pile)} cards" for name, pile in self._entries)
        return f"Image({{{inner}}})"

    def __str__(self) -> str:
        return "\n".join(f"{name}: {pile}" for name, pile in self._entries)

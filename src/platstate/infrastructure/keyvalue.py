"""Key/value pair codec for the ``key=value;key=value`` parameter strings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

PAIR_SEPARATOR = ";"
VALUE_SEPARATOR = "="


class KeyValuePairs:
    """Insertion-ordered set of key/value pairs.

    A key given without ``=`` has the empty value, which is how key filters
    for :meth:`PlatformStateEngine.get_parameters` are expressed.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()) -> None:
        self._pairs: dict[str, str] = {}
        for key, value in pairs:
            self.add(key, value)

    @classmethod
    def parse(cls, text: str) -> KeyValuePairs:
        """Parse *text*; empty segments are ignored, the last duplicate wins.

        Examples:
            >>> str(KeyValuePairs.parse("a=1; b = 2;;c"))
            'a=1;b=2;c='
        """
        result = cls()
        for segment in text.split(PAIR_SEPARATOR):
            key, _, value = segment.partition(VALUE_SEPARATOR)
            key = key.strip()
            if key:
                result.add(key, value.strip())
        return result

    def add(self, key: str, value: str) -> None:
        self._pairs[key] = value

    def remove(self, key: str) -> None:
        self._pairs.pop(key, None)

    def get(self, key: str) -> str | None:
        return self._pairs.get(key)

    def keys(self) -> list[str]:
        return list(self._pairs)

    def items(self) -> list[tuple[str, str]]:
        return list(self._pairs.items())

    def __contains__(self, key: object) -> bool:
        return key in self._pairs

    def __len__(self) -> int:
        return len(self._pairs)

    def __iter__(self) -> Iterator[str]:
        return iter(self._pairs)

    def __str__(self) -> str:
        return PAIR_SEPARATOR.join(f"{key}{VALUE_SEPARATOR}{value}" for key, value in self.items())

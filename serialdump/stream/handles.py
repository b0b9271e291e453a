"""Back-reference handle table for a single decode session."""

from collections.abc import Iterator
from typing import Any

from .constants import BASE_WIRE_HANDLE
from .errors import UnknownHandleError


class HandleTable:
    """Assigns sequential handles and resolves references to them."""

    def __init__(self, base: int = BASE_WIRE_HANDLE) -> None:
        self._base = base
        self._next = base
        self._entities: dict[int, Any] = {}

    @property
    def base(self) -> int:
        return self._base

    @property
    def minted(self) -> list[int]:
        """Handles minted so far, in mint order."""
        return list(range(self._base, self._next))

    def mint(self) -> int:
        handle = self._next
        self._next += 1
        return handle

    def register(self, handle: int, entity: Any) -> None:
        if not self._base <= handle < self._next:
            raise UnknownHandleError(f"Handle 0x{handle:X} was never minted")
        self._entities[handle] = entity

    def resolve(self, handle: int) -> Any:
        if handle not in self._entities:
            raise UnknownHandleError(f"Unknown handle 0x{handle:X}")
        return self._entities[handle]

    def __contains__(self, handle: object) -> bool:
        return handle in self._entities

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._entities))

"""
=============================================================================
RESPONSE HEADER COLLECTION
=============================================================================

An ordered multimap of header name → value, both byte strings.

=============================================================================
WHY NOT A DICT?
=============================================================================

A plain dict holds one value per key, but HTTP allows a header to repeat:

    Set-Cookie: session=abc; Path=/\r\n
    Set-Cookie: theme=dark; Path=/\r\n

Set-Cookie values cannot be merged into one comma-joined line (cookie
dates contain commas), so each one must be stored and sent separately.
Emission order is also observable on the wire, so the collection keeps
every (name, value) pair in insertion order:

    ┌───┬──────────────┬─────────────────────┐
    │ # │ name         │ value               │
    ├───┼──────────────┼─────────────────────┤
    │ 0 │ Content-Type │ text/html           │
    │ 1 │ Set-Cookie   │ session=abc; Path=/ │
    │ 2 │ Set-Cookie   │ theme=dark; Path=/  │
    └───┴──────────────┴─────────────────────┘

    add("X-A", "1")   → append a row, never touches existing rows
    set("X-A", "1")   → drop every "X-A" row, then append one
    remove("X-A")     → drop every "X-A" row
    get_all("X-A")    → values of every "X-A" row, in order
    first("X-A")      → value of the first "X-A" row

=============================================================================
CASE SENSITIVITY
=============================================================================

Names are compared byte-for-byte: "Content-Type" and "content-type" are
different keys here. HTTP treats names case-insensitively, but this
collection stores exactly what it was given and sends it back unchanged.

=============================================================================
"""

from typing import Iterable, Iterator, Optional, Union

HeaderName = Union[str, bytes]
HeaderValue = Union[str, bytes]

CONTENT_TYPE_HEADER = b"Content-Type"
CONTENT_LENGTH_HEADER = b"Content-Length"


def to_bytes(value: Union[str, bytes, bytearray, memoryview]) -> bytes:
    """
    Coerce a header name or value to bytes.

    Text is encoded as latin-1, the historical charset of HTTP header
    fields; characters outside it raise UnicodeEncodeError.
    """
    if isinstance(value, str):
        return value.encode("latin-1")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise TypeError(f"Header fields must be str or bytes, not {type(value).__name__}")


class HeaderList:
    """
    Ordered, multi-valued, case-sensitive header collection.

    Accepts str or bytes everywhere and always hands back bytes.

    Example:
        >>> headers = HeaderList()
        >>> headers.add("Set-Cookie", "a=1")
        >>> headers.add("Set-Cookie", "b=2")
        >>> headers.get_all("Set-Cookie")
        [b'a=1', b'b=2']
        >>> headers.set("Set-Cookie", "c=3")
        >>> list(headers)
        [(b'Set-Cookie', b'c=3')]
    """

    __slots__ = ("_items",)

    def __init__(self, items: Optional[Iterable[tuple[HeaderName, HeaderValue]]] = None):
        self._items: list[tuple[bytes, bytes]] = []
        if items:
            for name, value in items:
                self.add(name, value)

    # =========================================================================
    # MUTATION
    # =========================================================================

    def add(self, name: HeaderName, value: HeaderValue) -> None:
        """Append a header. Existing entries with the same name are kept."""
        self._items.append((to_bytes(name), to_bytes(value)))

    def set(self, name: HeaderName, value: HeaderValue) -> None:
        """Replace every entry named ``name`` with a single new one."""
        self.remove(name)
        self.add(name, value)

    def remove(self, name: HeaderName) -> None:
        """Drop every entry named ``name``. No-op if there is none."""
        key = to_bytes(name)
        self._items = [item for item in self._items if item[0] != key]

    def clear(self) -> None:
        self._items.clear()

    # =========================================================================
    # QUERIES
    # =========================================================================

    def contains(self, name: HeaderName, value: Optional[HeaderValue] = None) -> bool:
        """
        Check for a header, optionally with an exact value.

        Args:
            name: Header name (exact match).
            value: If given, some entry named ``name`` must also hold
                   exactly this value.
        """
        key = to_bytes(name)
        if value is None:
            return any(item_name == key for item_name, _ in self._items)

        expected = to_bytes(value)
        return any(
            item_name == key and item_value == expected
            for item_name, item_value in self._items
        )

    def get_all(self, name: HeaderName) -> list[bytes]:
        """All values for ``name`` in insertion order (empty if absent)."""
        key = to_bytes(name)
        return [item_value for item_name, item_value in self._items if item_name == key]

    def first(self, name: HeaderName, default: Optional[bytes] = None) -> Optional[bytes]:
        """Value of the first entry named ``name``, or ``default``."""
        key = to_bytes(name)
        for item_name, item_value in self._items:
            if item_name == key:
                return item_value
        return default

    def items(self) -> list[tuple[bytes, bytes]]:
        """Snapshot of every (name, value) pair in order."""
        return list(self._items)

    # =========================================================================
    # PROTOCOL METHODS
    # =========================================================================

    def __iter__(self) -> Iterator[tuple[bytes, bytes]]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (str, bytes)):
            return False
        return self.contains(name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderList):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"HeaderList({self._items!r})"

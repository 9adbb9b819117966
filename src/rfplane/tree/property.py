"""A single observable leaf of a property tree."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from loguru import logger

from rfplane.types import PropertyTreeError, ReadOnlyPropertyError

T = TypeVar("T")

NOVALUE = object()


class Property(Generic[T]):
    """Observable value with optional write coercion and read publishing.

    Writes go through the coercer (if any) and the returned value is what the
    property stores, then every subscriber is called with the stored value.
    Reads return the publisher's value (if any) instead of the stored one, so
    a property with a publisher never serves a cached value.

    Parameters
    ----------
    path : str
        Absolute path of this leaf in its tree
    value : T, optional
        Initial value, stored as-is (the coercer is not applied)
    coercer : Callable[[T], T], optional
        Applied on every write, its return value becomes the stored value
    publisher : Callable[[], T], optional
        Called on every read instead of returning the stored value
    read_only : bool, optional
        If True, `set` raises once the property holds a value
    """

    def __init__(
        self,
        path: str,
        value: Any = NOVALUE,
        coercer: Optional[Callable[[T], T]] = None,
        publisher: Optional[Callable[[], T]] = None,
        read_only: bool = False,
    ):
        self.path = path
        self.read_only = read_only
        self._value = value
        self._desired = value
        self._coercer = coercer
        self._publisher = publisher
        self._subscribers: list[Callable[[T], None]] = []

    def __repr__(self) -> str:
        flags = []
        if self._coercer is not None:
            flags.append("coerced")
        if self._publisher is not None:
            flags.append("published")
        if self.read_only:
            flags.append("read_only")
        return f"Property({self.path!r}, {'|'.join(flags) or 'plain'})"

    def set_coercer(self, coercer: Callable[[T], T]) -> Property[T]:
        if self._coercer is not None:
            raise PropertyTreeError(f"Coercer already set for {self.path}")
        self._coercer = coercer
        return self

    def set_publisher(self, publisher: Callable[[], T]) -> Property[T]:
        if self._publisher is not None:
            raise PropertyTreeError(f"Publisher already set for {self.path}")
        self._publisher = publisher
        return self

    def add_subscriber(self, subscriber: Callable[[T], None]) -> Property[T]:
        self._subscribers.append(subscriber)
        return self

    def has_value(self) -> bool:
        return self._value is not NOVALUE or self._publisher is not None

    def set(self, value: T) -> T:
        """Write a value, return what was stored (the coerced value)."""
        if self.read_only and self._value is not NOVALUE:
            raise ReadOnlyPropertyError(f"Property {self.path} is read-only")
        desired = value
        if self._coercer is not None:
            value = self._coercer(value)
        self._desired = desired
        self._value = value
        for subscriber in self._subscribers:
            subscriber(value)
        logger.trace("Set {} = {!r}", self.path, value)
        return value

    def get(self) -> T:
        if self._publisher is not None:
            return self._publisher()
        if self._value is NOVALUE:
            raise PropertyTreeError(f"Property {self.path} has no value")
        return self._value

    def get_desired(self) -> T:
        """Last value written before coercion."""
        if self._desired is NOVALUE:
            raise PropertyTreeError(f"Property {self.path} has no value")
        return self._desired

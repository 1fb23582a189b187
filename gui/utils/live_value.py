"""Observable values for the GUI layer.

A LiveValue holds the latest value and calls its observers on every set().
New observers are called once right away with the current value. Values are
set from the foreground thread only; observers run synchronously there.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, List, Optional, TypeVar

from gui.utils.logging import log

T = TypeVar("T")
R = TypeVar("R")

Observer = Callable[[T], Any]


class LiveValue(Generic[T]):
    def __init__(self, value: T = None):
        self._value = value
        self._observers: List[Observer] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for observer in list(self._observers):
            observer(value)

    def observe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a function that removes it."""
        self._observers.append(observer)
        observer(self._value)

        def remove() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return remove

    def map(self, transform: Callable[[T], R]) -> "LiveValue[R]":
        """Derived value that follows this one through `transform`."""
        derived: LiveValue[R] = LiveValue(transform(self._value))
        self._observers.append(lambda v: derived.set(transform(v)))
        return derived


class OneShotSignal(LiveValue[Optional[T]]):
    """Edge-triggered event: fired once, then acknowledged by the consumer.

    Observers see the payload when fired and None after acknowledge(), so a
    consumer acts only on non-None values. Until acknowledged the payload
    stays pending and is replayed to late observers.
    """

    def __init__(self, name: str):
        super().__init__(None)
        self.name = name

    @property
    def pending(self) -> bool:
        return self._value is not None

    def fire(self, payload: T) -> None:
        if payload is None:
            raise ValueError("signal payload cannot be None")
        log(f"Signal {self.name} fired with {payload!r}", "DEBUG")
        self.set(payload)

    def acknowledge(self) -> None:
        if self._value is not None:
            self.set(None)

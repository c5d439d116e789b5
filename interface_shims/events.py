"""
interface_shims/events.py
=========================

Declarative events for implementers and interfaces.

An event is declared on the class body::

    class Potion:
        implements = [CanHeal]
        healed = Event("amount")

Class-level access yields the :class:`Event` descriptor itself, which is
what member inspection looks for.  Instance access yields a
:class:`BoundEvent` that holds the handlers connected on that instance.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

__all__ = ["Event", "BoundEvent"]

Handler = Callable[..., Any]


class Event:
    """Descriptor declaring an event named after the attribute it is bound to."""

    def __init__(self, *arg_names: str) -> None:
        self.arg_names: Tuple[str, ...] = tuple(arg_names)
        self.name: Optional[str] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return BoundEvent(self, instance)

    @property
    def storage_key(self) -> str:
        return f"_event_handlers_{self.name}"

    def __repr__(self) -> str:
        args = ", ".join(self.arg_names)
        return f"Event({self.name}({args}))"


class BoundEvent:
    """An :class:`Event` seen through one instance."""

    def __init__(self, event: Event, instance: Any) -> None:
        self.event = event
        self.instance = instance

    @property
    def handlers(self) -> List[Handler]:
        store = self.instance.__dict__
        return store.setdefault(self.event.storage_key, [])

    def connect(self, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError(f"event handler must be callable, got {handler!r}")
        self.handlers.append(handler)

    def disconnect(self, handler: Handler) -> None:
        try:
            self.handlers.remove(handler)
        except ValueError:
            raise ValueError(
                f"{handler!r} is not connected to event '{self.event.name}'"
            ) from None

    def emit(self, *args: Any) -> int:
        """Call every connected handler in connection order.

        Returns the number of handlers called.
        """
        # snapshot, handlers may disconnect themselves
        called = 0
        for handler in list(self.handlers):
            handler(*args)
            called += 1
        return called

    def __repr__(self) -> str:
        return f"<BoundEvent {self.event.name} of {type(self.instance).__name__}>"

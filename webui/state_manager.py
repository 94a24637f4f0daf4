"""
State manager for the Runway explorer UI.
Reactive observable pattern with automatic Streamlit session state sync.

Only view state lives here (upload slots, widget selections, the session's
controller). Business state is owned by the controllers.

Usage:
    StateManager.selected_source = "person"  # Automatically synced to session state
    with StateManager.observe(StateManager.selected_source):
        # Code re-runs when selected_source changes
        pass
"""

import copy
import streamlit as st
from typing import (
    Optional, Dict, List, Type, Iterator, MutableMapping,
    TypeVar, Generic, ClassVar, Callable
)
from contextlib import contextmanager
from types import TracebackType

from explorer.models import default_image_slots

T = TypeVar('T')


class Observable(Generic[T]):
    """
    Observable wrapper for reactive state management.
    Holds no value itself: reads and writes go to the storage of the store
    class it is declared on, so each session sees only its own values.
    """

    def __init__(self, key: str, initial_value: Optional[T] = None,
                 factory: Optional[Callable[[], T]] = None) -> None:
        self.key: str = key
        self._factory = factory
        self._initial: Optional[T] = initial_value
        self._owner: Optional[type] = None
        self._active_contexts: List['Observable[T]'] = []

    def __set_name__(self, owner: type, name: str) -> None:
        self._owner = owner

    def initial_value(self) -> Optional[T]:
        """Fresh default value; factories avoid sharing mutable defaults."""
        if self._factory is not None:
            return self._factory()
        return copy.copy(self._initial)

    def _storage(self) -> MutableMapping:
        return self._owner.storage()

    @property
    def value(self) -> Optional[T]:
        """Get the current value, seeding the default on first access."""
        storage = self._storage()
        if self.key not in storage:
            storage[self.key] = self.initial_value()
        return storage[self.key]

    def set(self, value: Optional[T]) -> None:
        """Set the value and trigger re-runs of active contexts."""
        current = self.value
        if current is not value and current != value:
            self._storage()[self.key] = value
            if self._active_contexts:
                st.rerun()

    def __enter__(self) -> Optional[T]:
        self._active_contexts.append(self)
        return self.value

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType]
    ) -> None:
        if self in self._active_contexts:
            self._active_contexts.remove(self)

    def __bool__(self) -> bool:
        return bool(self.value)

    def __repr__(self) -> str:
        return f"Observable({self.key!r})"


# Type alias for subscriptable observables (class variables)
Subscriptable = ClassVar[Observable[Optional[T]]]


class StoreMeta(type):
    """Metaclass for Store to intercept class attribute assignment."""

    def __setattr__(cls, name: str, value: object) -> None:
        if hasattr(cls, name):
            attr = getattr(cls, name)
            if isinstance(attr, Observable):
                attr.set(value)
                return
        super().__setattr__(name, value)


class Store(metaclass=StoreMeta):
    """Base store with observable management and context observation."""

    _values: ClassVar[Dict[str, object]] = {}

    @classmethod
    def storage(cls) -> MutableMapping:
        """Mapping that holds the observable values."""
        return cls._values

    @classmethod
    def observables(cls) -> List[Observable]:
        return [getattr(cls, name) for name in dir(cls) if isinstance(getattr(cls, name), Observable)]

    @classmethod
    @contextmanager
    def observe(cls, *observables: Observable) -> Iterator[None]:
        """Context manager for observing multiple observables."""
        for obs in observables:
            obs._active_contexts.append(obs)
        try:
            yield
        finally:
            for obs in observables:
                if obs in obs._active_contexts:
                    obs._active_contexts.remove(obs)


class StreamlitStore(Store):
    """Store backed by the current session's ``st.session_state``."""

    @classmethod
    def storage(cls) -> MutableMapping:
        return st.session_state

    @classmethod
    def sync(cls) -> None:
        """Seed defaults for any key this session has not seen yet."""
        for observable in cls.observables():
            observable.value


class StateManager(StreamlitStore):
    """Manages Streamlit session state with type safety and observable pattern."""

    controller: Subscriptable[object] = Observable("controller")
    image_slots: Subscriptable[list] = Observable("image_slots", factory=default_image_slots)
    slot_versions: Subscriptable[dict] = Observable("slot_versions", factory=dict)
    selected_source: Subscriptable[str] = Observable("selected_source", "setting")

    @classmethod
    def initialize(cls) -> None:
        """Seed this session's state; call once per script run."""
        cls.sync()

    @classmethod
    def slot_version(cls, key: str) -> int:
        return cls.slot_versions.value.get(key, 0)

    @classmethod
    def clear_slot(cls, slot) -> None:
        """Empty ``slot`` and remount its file uploader."""
        slot.clear()
        cls.slot_versions.value[slot.key] = cls.slot_version(slot.key) + 1

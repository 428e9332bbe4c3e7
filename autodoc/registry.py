"""Keyed registry for pluggable implementations.

Header filters are looked up by a short key so that callers can pick a
filtering strategy from configuration instead of importing a class::

    header_filter_registry = Registry("header filter")

    @header_filter_registry.register("names")
    class SkipHeaders(HeadersSkipper):
        ...

    skipper = header_filter_registry.create("names", names=["Date"])
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Type, TypeVar

T = TypeVar("T")


class Registry:
    """Map string keys to classes and build instances on demand."""

    def __init__(self, name: str = "registry") -> None:
        """Initialize the registry.

        Args:
            name: Human-readable name used in error messages.
        """
        self._name = name
        self._items: Dict[str, Type[Any]] = {}

    def register(self, key: str) -> Callable[[Type[T]], Type[T]]:
        """Class decorator registering the decorated class under *key*.

        Raises:
            ValueError: If *key* is already taken.
        """
        def decorator(cls: Type[T]) -> Type[T]:
            if key in self._items:
                raise ValueError(
                    f"{self._name}: key '{key}' already registered "
                    f"to {self._items[key].__name__}"
                )
            self._items[key] = cls
            return cls
        return decorator

    def get(self, key: str) -> Type[Any]:
        """Return the class registered under *key*.

        Raises:
            KeyError: If the key is not registered.
        """
        if key not in self._items:
            available = ", ".join(sorted(self._items))
            raise KeyError(
                f"{self._name}: unknown key '{key}'. "
                f"Available: {available}"
            )
        return self._items[key]

    def create(self, key: str, *args: Any, **kwargs: Any) -> Any:
        """Instantiate the class registered under *key*.

        Positional and keyword arguments go to the constructor.
        """
        return self.get(key)(*args, **kwargs)

    def keys(self) -> List[str]:
        """Return the registered keys in registration order."""
        return list(self._items)

    def __contains__(self, key: str) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

from typing import Any, Callable, Generic, Optional, TypeVar

__all__ = ("TypeDispatcher",)


T = TypeVar("T")


class TypeDispatcher(Generic[T]):
    """Type-keyed lookup table with cached MRO resolution.

    Used by the renderer to pick the handler for each node type without a
    chain of ``isinstance`` checks.
    """

    __slots__ = ("_cache", "_registry")

    def __init__(self) -> None:
        self._cache: dict[type, T] = {}
        self._registry: dict[type, T] = {}

    def register(self, type_: type) -> "Callable[[T], T]":
        """Decorator registering the wrapped value for ``type_``.

        Args:
            type_: The type to register.

        Returns:
            A decorator that stores its argument and returns it unchanged.
        """

        def decorator(value: T) -> T:
            self._registry[type_] = value
            self._cache.clear()
            return value

        return decorator

    def get(self, obj: Any) -> Optional[T]:
        """Get the value registered for the object's type or the nearest base class."""
        obj_type = type(obj)
        if obj_type in self._cache:
            return self._cache[obj_type]
        for base in obj_type.__mro__:
            if base in self._registry:
                value = self._registry[base]
                self._cache[obj_type] = value
                return value
        return None

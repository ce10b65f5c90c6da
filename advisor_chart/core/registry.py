"""
Indicator registry for the advisor chart engine.

Indicators register themselves under a short upper-case name with the
``@register`` decorator. The engine and the configuration loader then refer
to them by that name: ``create("SMA", length=100)`` builds an instance after
checking the parameters against the indicator's ``params()`` defaults, so a
typo in an overlay configuration fails early with the list of valid keys.
"""

import threading
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

__all__ = [
    "IndicatorRegistry",
    "RegistrationError",
    "create",
    "get",
    "list_registered",
    "register",
    "resolve_params",
]

T = TypeVar("T")


class RegistrationError(Exception):
    """Raised when there are issues with plugin registration or retrieval."""

    pass


class IndicatorRegistry:
    """Thread-safe mapping from indicator names to indicator classes."""

    def __init__(self):
        self._classes: dict[str, type] = {}
        self._lock = threading.RLock()

    def add(self, name: str, cls: type) -> None:
        with self._lock:
            current = self._classes.setdefault(name, cls)
        if current is not cls:
            raise RegistrationError(
                f"Name '{name}' is already registered to {current.__module__}.{current.__name__}"
            )

    def lookup(self, name: str) -> type:
        if not isinstance(name, str):
            raise RegistrationError(
                f"Registry lookup name must be a string, got {type(name).__name__}"
            )
        with self._lock:
            try:
                return self._classes[name]
            except KeyError:
                raise RegistrationError(
                    f"No class registered under name '{name}'. "
                    f"Available registrations: {sorted(self._classes)}"
                ) from None

    def resolve_params(self, name: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """
        Merge ``params`` over the defaults of indicator ``name``.

        Classes without a ``params()`` method accept any keyword.

        Raises:
            RegistrationError: If the name is unknown or a key is not one of
                the indicator's parameters.
        """
        cls = self.lookup(name)
        defaults_fn = getattr(cls, "params", None)
        if defaults_fn is None:
            return dict(params)

        defaults = defaults_fn()
        unknown = sorted(set(params) - set(defaults))
        if unknown:
            raise RegistrationError(
                f"Unknown parameters {unknown} for indicator '{name}', "
                f"expected some of {sorted(defaults)}"
            )
        return {**defaults, **params}

    def create(self, name: str, **params: Any) -> Any:
        """Instantiate indicator ``name`` with checked parameters."""
        return self.lookup(name)(**self.resolve_params(name, params))

    def describe(self) -> dict[str, str]:
        """Map each registered name to the dotted path of its class."""
        with self._lock:
            return {
                name: f"{cls.__module__}.{cls.__name__}"
                for name, cls in sorted(self._classes.items())
            }


_default = IndicatorRegistry()


def register(name: str) -> Callable[[type[T]], type[T]]:
    """
    Class decorator adding an indicator to the default registry.

    Re-registering the same class under the same name is a no-op, so modules
    can be reloaded.

    Raises:
        RegistrationError: If the name is not a non-empty string or is already
            taken by a different class.

    Example:
        >>> @register("SMA")
        ... class SMA(BaseIndicator):
        ...     ...
        >>> get("SMA") is SMA
        True
    """
    if not isinstance(name, str):
        raise RegistrationError(
            f"Registration name must be a string, got {type(name).__name__}"
        )
    if not name.strip():
        raise RegistrationError("Registration name cannot be empty")

    def _decorator(cls: type[T]) -> type[T]:
        _default.add(name, cls)
        return cls

    return _decorator


def get(name: str) -> type:
    """Return the class registered under ``name``."""
    return _default.lookup(name)


def resolve_params(name: str, params: Mapping[str, Any]) -> dict[str, Any]:
    """Defaults of ``name`` updated with ``params``; see ``IndicatorRegistry.resolve_params``."""
    return _default.resolve_params(name, params)


def create(name: str, **params: Any) -> Any:
    """Build the indicator registered under ``name``."""
    return _default.create(name, **params)


def list_registered() -> dict[str, str]:
    return _default.describe()

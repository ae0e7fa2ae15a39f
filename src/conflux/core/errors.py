"""Exception taxonomy for the Conflux configuration delivery layer."""

from __future__ import annotations

from typing import Any, List, Sequence, Tuple

from .types import shape_name


class ConfluxError(Exception):
    """Base class for all errors raised by Conflux."""


class SourceUnavailable(ConfluxError):
    """A backing source could not be read.

    Raised by sources and accessors; providers propagate it unchanged to the
    caller of ``get_data``, ``probe`` or ``refresh``.
    """


class NotFound(ConfluxError):
    """A mandatory raw property has no value in the backing store."""

    def __init__(self, key: str, message: str = ""):
        self.key = key
        super().__init__(message or f"No value found for property '{key}'")


class BindingError(ConfluxError, ValueError):
    """A raw property value can't be converted to the declared field type."""


class BuilderFailure(ConfluxError):
    """Convenience error for builder functions.

    Builders may raise anything; providers never wrap builder exceptions.
    """


class NoProviderForShape(ConfluxError, LookupError):
    """A composite lookup found no member registered for the requested shape."""

    def __init__(self, requested: Any, available: Sequence[Any]):
        self.requested = requested
        self.available = list(available)
        names = ", ".join(shape_name(s) for s in self.available)
        super().__init__(
            f"No config provider is registered for shape {shape_name(requested)}, "
            f"available: [{names}]"
        )


class EventDeliveryError(ConfluxError):
    """One or more subscribers failed while an event was being delivered.

    Attributes:
        failures: (subscriber, exception) pairs in delivery order.
    """

    def __init__(self, event: Any, failures: List[Tuple[Any, BaseException]]):
        self.event = event
        self.failures = failures
        super().__init__(
            f"{len(failures)} subscriber(s) failed handling {type(event).__name__}: "
            + "; ".join(f"{type(exc).__name__}: {exc}" for _, exc in failures)
        )

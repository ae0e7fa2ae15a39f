"""Conflux - cached, change-aware configuration delivery.

Bind raw configuration from pluggable sources, derive typed public
configuration from it, cache the result and announce real changes to
interested providers.
"""

import logging

from .core.accessor import SourceAccessor, StaticAccessor
from .core.composite import CompositeConfigProvider, ProviderLookup
from .core.environment import Environment
from .core.errors import (
    BindingError,
    BuilderFailure,
    ConfluxError,
    EventDeliveryError,
    NoProviderForShape,
    NotFound,
    SourceUnavailable,
)
from .core.events import ConfigChangedEvent, EventBus, RefreshConfigsEvent
from .core.factory import ConfigProviderFactory
from .core.filters import Filter
from .core.prefix import PrefixRegistry, config_prefix
from .core.provider import ConfigProvider, DelegatingConfigProvider, Raw2PublicConfigProvider

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "SourceAccessor",
    "StaticAccessor",
    "CompositeConfigProvider",
    "ProviderLookup",
    "Environment",
    "BindingError",
    "BuilderFailure",
    "ConfluxError",
    "EventDeliveryError",
    "NoProviderForShape",
    "NotFound",
    "SourceUnavailable",
    "ConfigChangedEvent",
    "EventBus",
    "RefreshConfigsEvent",
    "ConfigProviderFactory",
    "Filter",
    "PrefixRegistry",
    "config_prefix",
    "ConfigProvider",
    "DelegatingConfigProvider",
    "Raw2PublicConfigProvider",
]

from .accessor import RawAccessor, SourceAccessor, StaticAccessor
from .cache import CachedSlot, CachingConfigProvider
from .composite import CompositeConfigProvider, ProviderLookup
from .environment import Environment
from .errors import (
    BindingError,
    BuilderFailure,
    ConfluxError,
    EventDeliveryError,
    NoProviderForShape,
    NotFound,
    SourceUnavailable,
)
from .events import ConfigChangedEvent, ConfigEventManager, EventBus, RefreshConfigsEvent
from .factory import ConfigProviderFactory
from .filters import Filter
from .prefix import PrefixRegistry, config_prefix, resolve_prefix
from .provider import ConfigProvider, DelegatingConfigProvider, Raw2PublicConfigProvider
from .source import RegisteredSource, Source

__all__ = [
    "RawAccessor",
    "SourceAccessor",
    "StaticAccessor",
    "CachedSlot",
    "CachingConfigProvider",
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
    "ConfigEventManager",
    "EventBus",
    "RefreshConfigsEvent",
    "ConfigProviderFactory",
    "Filter",
    "PrefixRegistry",
    "config_prefix",
    "resolve_prefix",
    "ConfigProvider",
    "DelegatingConfigProvider",
    "Raw2PublicConfigProvider",
    "RegisteredSource",
    "Source",
]

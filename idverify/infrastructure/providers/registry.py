"""
Infrastructure: Provider Registry

Maps provider names to constructor functions and caches the constructed
adapters so connection pools and rate-limit state are shared across
verifications instead of recreated per request.
"""

import threading
from typing import Callable, Dict, List, Optional

from idverify.application.interfaces import IProviderRegistry, VerificationProvider
from idverify.domain.verification.errors import ConfigurationError
from idverify.logging_utils import StructuredLogger
from idverify.models import ComponentType, EventType

ProviderConstructor = Callable[[], VerificationProvider]


class ProviderRegistry(IProviderRegistry):
    """
    Registry of known provider constructors with a lazily filled cache.

    Two calls with the same name return the same instance until
    clear_cache() is called. Concurrent first calls for the same name
    construct exactly one instance (double-checked locking).
    """

    def __init__(
        self,
        constructors: Optional[Dict[str, ProviderConstructor]] = None,
        cache: Optional[Dict[str, VerificationProvider]] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Initialize registry.

        Args:
            constructors: Provider name -> zero-argument constructor
            cache: Optional pre-existing cache to share (injected in tests)
            logger: Optional structured logger
        """
        self._lock = threading.Lock()
        self._constructors: Dict[str, ProviderConstructor] = {}
        self._cache: Dict[str, VerificationProvider] = cache if cache is not None else {}
        self._logger = logger or StructuredLogger(ComponentType.REGISTRY)

        # Seeding must not evict instances already held by an injected cache
        for name, constructor in (constructors or {}).items():
            self._constructors[self._require_key(name)] = constructor

    @staticmethod
    def _key(name: Optional[str]) -> str:
        return (name or "").strip().lower()

    def _require_key(self, name: Optional[str]) -> str:
        key = self._key(name)
        if not key:
            raise ConfigurationError("Provider name cannot be empty")
        return key

    def register(self, name: str, constructor: ProviderConstructor) -> None:
        """
        Add or replace a provider constructor.

        Replacing a constructor drops any instance cached under that name.
        """
        key = self._require_key(name)
        with self._lock:
            self._constructors[key] = constructor
            self._cache.pop(key, None)

    def get_provider(self, name: str) -> VerificationProvider:
        """
        Get the cached provider for `name`, constructing it on first use.

        Raises:
            ConfigurationError: unknown name, or the constructor failed
                (e.g. missing credentials)
        """
        key = self._key(name)

        provider = self._cache.get(key)
        if provider is not None:
            return provider

        with self._lock:
            # Double-check locking pattern
            provider = self._cache.get(key)
            if provider is None:
                constructor = self._constructors.get(key)
                if constructor is None:
                    raise ConfigurationError(f"Unknown verification provider: {name}")
                try:
                    provider = constructor()
                except ConfigurationError:
                    raise
                except Exception as e:
                    raise ConfigurationError(
                        f"Failed to initialize verification provider '{key}': {e}"
                    ) from e
                self._cache[key] = provider
                self._logger.log_event("registry", EventType.PROVIDER_INITIALIZED, {
                    "provider_name": key,
                })
        return provider

    def is_available(self, name: str) -> bool:
        return self._key(name) in self._constructors

    def list_available(self) -> List[str]:
        return sorted(self._constructors)

    def clear_cache(self) -> None:
        """Drop every cached instance so the next lookup reconstructs it."""
        with self._lock:
            self._cache.clear()

    async def aclose(self) -> None:
        """Close every cached provider, then clear the cache."""
        with self._lock:
            providers = list(self._cache.values())
            self._cache.clear()
        for provider in providers:
            await provider.close()

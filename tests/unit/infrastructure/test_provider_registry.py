"""
Unit tests for ProviderRegistry

Tests:
- Case-insensitive lookup and caching
- Unknown names and failing constructors
- Single construction under concurrent first access
- Cache clearing and shutdown
"""

import threading
import time

import pytest
from unittest.mock import AsyncMock, MagicMock

from idverify.domain.verification.errors import ConfigurationError
from idverify.infrastructure.providers import ProviderRegistry


def make_provider(name="stub"):
    provider = MagicMock()
    provider.name = name
    provider.close = AsyncMock()
    return provider


class TestLookup:

    def test_returns_cached_instance(self):
        constructor = MagicMock(side_effect=lambda: make_provider())
        registry = ProviderRegistry({"stub": constructor})

        first = registry.get_provider("stub")
        second = registry.get_provider("stub")

        assert first is second
        assert constructor.call_count == 1

    def test_lookup_is_case_insensitive(self):
        registry = ProviderRegistry({"Dojah": make_provider})

        assert registry.get_provider(" DOJAH ") is registry.get_provider("dojah")

    def test_unknown_name_raises_configuration_error(self):
        registry = ProviderRegistry({"dojah": make_provider})

        with pytest.raises(ConfigurationError, match="Unknown verification provider"):
            registry.get_provider("youverify")

    def test_constructor_configuration_error_propagates_unchanged(self):
        error = ConfigurationError("DOJAH_API_KEY missing")
        registry = ProviderRegistry({"dojah": MagicMock(side_effect=error)})

        with pytest.raises(ConfigurationError) as exc_info:
            registry.get_provider("dojah")
        assert exc_info.value is error

    def test_constructor_failure_is_wrapped_and_not_cached(self):
        constructor = MagicMock(side_effect=[RuntimeError("boom"), make_provider()])
        registry = ProviderRegistry({"flaky": constructor})

        with pytest.raises(ConfigurationError, match="boom"):
            registry.get_provider("flaky")

        # A later lookup retries construction
        assert registry.get_provider("flaky").name == "stub"
        assert constructor.call_count == 2

    def test_availability(self):
        registry = ProviderRegistry({"sandbox": make_provider, "Dojah": make_provider})

        assert registry.is_available("DOJAH")
        assert not registry.is_available("youverify")
        assert registry.list_available() == ["dojah", "sandbox"]

    def test_register_replaces_cached_instance(self):
        registry = ProviderRegistry({"stub": make_provider})
        old = registry.get_provider("stub")

        replacement = make_provider("replacement")
        registry.register("stub", lambda: replacement)

        assert registry.get_provider("stub") is replacement
        assert registry.get_provider("stub") is not old

    def test_register_rejects_blank_name(self):
        with pytest.raises(ConfigurationError):
            ProviderRegistry().register("  ", make_provider)

    def test_constructor_map_rejects_blank_name(self):
        with pytest.raises(ConfigurationError):
            ProviderRegistry({"": make_provider})

    def test_injected_cache_is_used(self):
        cached = make_provider("cached")
        constructor = MagicMock()
        registry = ProviderRegistry({"stub": constructor}, cache={"stub": cached})

        assert registry.get_provider("stub") is cached
        constructor.assert_not_called()


class TestConcurrency:

    def test_concurrent_first_access_constructs_once(self):
        calls = []

        def slow_constructor():
            calls.append(1)
            time.sleep(0.05)
            return make_provider()

        registry = ProviderRegistry({"slow": slow_constructor})
        barrier = threading.Barrier(8)
        results = []

        def worker():
            barrier.wait()
            results.append(registry.get_provider("slow"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(results) == 8
        assert all(r is results[0] for r in results)


class TestLifecycle:

    def test_clear_cache_forces_reconstruction(self):
        constructor = MagicMock(side_effect=lambda: make_provider())
        registry = ProviderRegistry({"stub": constructor})

        first = registry.get_provider("stub")
        registry.clear_cache()
        second = registry.get_provider("stub")

        assert first is not second
        assert constructor.call_count == 2

    @pytest.mark.asyncio
    async def test_aclose_closes_cached_providers(self):
        provider = make_provider()
        constructor = MagicMock(return_value=provider)
        registry = ProviderRegistry({"stub": constructor, "unused": make_provider})
        registry.get_provider("stub")

        await registry.aclose()

        provider.close.assert_awaited_once()
        # Cache is empty afterwards; next lookup constructs again
        registry.get_provider("stub")
        assert constructor.call_count == 2

"""
Infrastructure: Verification Factory

Dependency injection factory for assembling the verification core.
Single source of truth for component wiring.
"""

import copy
import os
from typing import Any, Dict, Optional

from idverify.application.use_cases import VerificationOrchestrator
from idverify.config import get_idverify_config
from idverify.domain.matching import MatchThresholds, NameMatcher
from idverify.domain.verification.services import RetryPolicy
from idverify.infrastructure.providers import DojahProvider, ProviderRegistry, SandboxProvider
from idverify.logging_utils import StructuredLogger
from idverify.models import ComponentType

# Environment variable -> (config path, converter)
ENV_OVERRIDES = {
    "IDVERIFY_DEFAULT_PROVIDER": (("providers", "default"), str),
    "IDVERIFY_ACCEPT_THRESHOLD": (("policy", "accept_threshold"), int),
    "IDVERIFY_REVIEW_THRESHOLD": (("policy", "review_threshold"), int),
    "IDVERIFY_MAX_RETRIES": (("retry", "max_retries"), int),
    "IDVERIFY_CALL_TIMEOUT": (("timeouts", "call_timeout"), float),
    "DOJAH_API_KEY": (("providers", "dojah", "api_key"), str),
    "DOJAH_APP_ID": (("providers", "dojah", "app_id"), str),
    "DOJAH_BASE_URL": (("providers", "dojah", "base_url"), str),
}


class VerificationFactory:
    """
    Factory for creating verification components.

    Implements dependency injection pattern.
    """

    @staticmethod
    def create_registry(config: Dict[str, Any]) -> ProviderRegistry:
        """
        Create a registry with every known adapter registered.

        Adapters are constructed lazily on first lookup, so a missing
        Dojah credential only surfaces when Dojah is actually requested.
        """
        providers_config = config.get("providers") or {}
        dojah_config = dict(providers_config.get("dojah") or {})
        sandbox_config = dict(providers_config.get("sandbox") or {})

        return ProviderRegistry(
            constructors={
                "dojah": lambda: DojahProvider.from_config(dojah_config),
                "sandbox": lambda: SandboxProvider.from_config(sandbox_config),
            },
            logger=StructuredLogger(ComponentType.REGISTRY),
        )

    @staticmethod
    def create_orchestrator(
        config: Optional[Dict[str, Any]] = None,
        registry: Optional[ProviderRegistry] = None,
    ) -> VerificationOrchestrator:
        """
        Create fully wired VerificationOrchestrator.

        Args:
            config: Configuration dict (defaults to the packaged YAML)
            registry: Optional registry (built from config if None)

        Returns:
            Fully configured VerificationOrchestrator instance
        """
        config = config if config is not None else get_idverify_config()
        policy_config = config.get("policy") or {}

        name_matcher = NameMatcher(MatchThresholds.from_config(policy_config))
        retry_policy = RetryPolicy.from_config(config.get("retry") or {})

        return VerificationOrchestrator(
            registry=registry or VerificationFactory.create_registry(config),
            name_matcher=name_matcher,
            retry_policy=retry_policy,
            call_timeout=float((config.get("timeouts") or {}).get("call_timeout", 30.0)),
            default_provider=(config.get("providers") or {}).get("default", "dojah"),
            require_dob_match=bool(policy_config.get("require_dob_match", True)),
            logger=StructuredLogger(ComponentType.ORCHESTRATOR),
        )

    @staticmethod
    def apply_env_overrides(config: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of config with environment overrides applied."""
        merged = copy.deepcopy(config)
        for env_name, (path, convert) in ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw is None or raw == "":
                continue
            section = merged
            for key in path[:-1]:
                section = section.setdefault(key, {})
            section[path[-1]] = convert(raw)
        return merged

    @staticmethod
    def create_from_env(config_path: Optional[str] = None) -> VerificationOrchestrator:
        """
        Create orchestrator from the YAML configuration plus environment.

        Convenience method for production deployment.

        Returns:
            Configured VerificationOrchestrator
        """
        config = VerificationFactory.apply_env_overrides(get_idverify_config(config_path))
        return VerificationFactory.create_orchestrator(config)

"""
IProviderRegistry Interface

Lookup contract the orchestrator uses to resolve a provider by name.
"""

from abc import ABC, abstractmethod
from typing import List

from .verification_provider import VerificationProvider


class IProviderRegistry(ABC):
    """
    Interface for resolving provider names to adapter instances.

    Implementations must return the same instance for the same name
    until their cache is cleared, and raise ConfigurationError for
    names they do not know.
    """

    @abstractmethod
    def get_provider(self, name: str) -> VerificationProvider:
        pass

    @abstractmethod
    def is_available(self, name: str) -> bool:
        pass

    @abstractmethod
    def list_available(self) -> List[str]:
        pass

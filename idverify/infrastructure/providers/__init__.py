"""
Verification provider adapters and the registry that caches them.
"""

from .base_provider import BaseVerificationProvider
from .dojah_provider import DojahProvider
from .registry import ProviderConstructor, ProviderRegistry
from .sandbox_provider import SandboxIdentity, SandboxProvider

__all__ = [
    "BaseVerificationProvider",
    "DojahProvider",
    "ProviderConstructor",
    "ProviderRegistry",
    "SandboxIdentity",
    "SandboxProvider",
]

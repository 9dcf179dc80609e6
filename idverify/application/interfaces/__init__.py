"""Interfaces - Dependency contracts for use cases"""
from .verification_provider import VerificationProvider
from .provider_registry import IProviderRegistry

__all__ = ["VerificationProvider", "IProviderRegistry"]

"""
Infrastructure Layer

Concrete vendor adapters, the provider registry and the factory that
wires them into the orchestrator.
"""

from .factory import VerificationFactory

__all__ = ["VerificationFactory"]

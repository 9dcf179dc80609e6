"""Use Cases - Application business logic"""
from .verification_orchestrator import VerificationOrchestrator

__all__ = ["VerificationOrchestrator"]

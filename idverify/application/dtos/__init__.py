"""Data Transfer Objects - Input/Output contracts for use cases"""
from .verification_request import VerificationRequest
from .verification_result import VerificationResult

__all__ = ["VerificationRequest", "VerificationResult"]

"""
IDVerify Core Package

Identity document verification against external KYC providers.

Architecture:
- Domain: name similarity, thresholds, error taxonomy, retry schedule
- Application: request/result DTOs, provider interface, orchestrator
- Infrastructure: vendor adapters, cached provider registry, factory
"""

__version__ = "0.1.0"

from .application.dtos import VerificationRequest, VerificationResult
from .application.use_cases import VerificationOrchestrator
from .domain.verification.entities import DocumentType, VerificationStatus
from .domain.verification.errors import ErrorKind
from .infrastructure import VerificationFactory

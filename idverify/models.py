from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from enum import Enum
import time


class ComponentType(str, Enum):
    ORCHESTRATOR = "VerificationOrchestrator"
    REGISTRY = "ProviderRegistry"
    PROVIDER = "VerificationProvider"


class EventType(str, Enum):
    VERIFICATION_RECEIVED = "Verification_Received"
    PROVIDER_SELECTED = "Provider_Selected"
    PROVIDER_CALL = "Provider_Call"
    RETRY_SCHEDULED = "Retry_Scheduled"
    VERIFICATION_COMPLETED = "Verification_Completed"
    VERIFICATION_FAILED = "Verification_Failed"
    STATUS_CHECKED = "Status_Checked"
    PROVIDER_INITIALIZED = "Provider_Initialized"


class LogEntry(BaseModel):
    trace_id: str
    timestamp: float = Field(default_factory=time.time)
    component: ComponentType
    event_type: EventType
    payload_hash: Optional[str] = None
    metrics: Dict[str, Any] = Field(default_factory=dict)
    message: Optional[str] = None

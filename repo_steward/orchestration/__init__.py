"""Session orchestration: interception wrapper, step-bounded loop, agent base."""

from .agent import MaintenanceAgent
from .interceptor import CapabilityInterceptor, SessionRecorder
from .loop import StepBoundedLoop

__all__ = [
    "CapabilityInterceptor",
    "MaintenanceAgent",
    "SessionRecorder",
    "StepBoundedLoop",
]

"""
Workflow orchestration: configuration, status polling and poller management.
"""

from .config import WorkflowConfig
from .status_poller import StatusPoller
from .task_manager import PollerManager
from .workflow import ReconstructionWorkflow

__all__ = [
    "WorkflowConfig",
    "StatusPoller",
    "PollerManager",
    "ReconstructionWorkflow",
]

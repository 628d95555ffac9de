"""Workflow views: signup, verification, deployment form and dashboard."""

from deploy_console.workflows.base import BaseWorkflow
from deploy_console.workflows.deploy_source import DeploymentSourceSelector, SourceMode
from deploy_console.workflows.monitor import DeploymentMonitor, SortOrder
from deploy_console.workflows.otp import OtpBuffer, OtpWorkflow
from deploy_console.workflows.registry import WorkflowRegistry
from deploy_console.workflows.signup import SignupStep, SignupWorkflow
from deploy_console.workflows.verification import SendCodeWorkflow, VerificationWorkflow

__all__ = [
    "BaseWorkflow",
    "OtpBuffer",
    "OtpWorkflow",
    "SignupStep",
    "SignupWorkflow",
    "SendCodeWorkflow",
    "VerificationWorkflow",
    "DeploymentSourceSelector",
    "SourceMode",
    "DeploymentMonitor",
    "SortOrder",
    "WorkflowRegistry",
]

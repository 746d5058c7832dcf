"""Vehicle submission wizard."""

from pickandgo.wizard.agreement_gate import AgreementGate
from pickandgo.wizard.controller import VehicleWizard, WizardPhase, WizardState
from pickandgo.wizard.submission import SubmissionOrchestrator, SubmissionResult

__all__ = [
    "AgreementGate",
    "SubmissionOrchestrator",
    "SubmissionResult",
    "VehicleWizard",
    "WizardPhase",
    "WizardState",
]

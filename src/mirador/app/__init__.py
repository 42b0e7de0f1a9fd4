"""
Shell de la aplicación.

Compone catálogo, store local y asistente.
"""

from mirador.app.onboarding import OnboardingWizard, OnboardingStep, ONBOARDING_STEPS
from mirador.app.shell import AssistantShell

__all__ = [
    "AssistantShell",
    "OnboardingWizard",
    "OnboardingStep",
    "ONBOARDING_STEPS",
]

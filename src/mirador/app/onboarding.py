"""
Wizard de onboarding.

Cinco pasos fijos que presentan la herramienta. Al terminar (o al
saltearlo) se marca el onboarding como completado en el store.
"""

from dataclasses import dataclass

from mirador.storage import OnboardingRepository


@dataclass(frozen=True)
class OnboardingStep:
    title: str
    description: str
    features: tuple[str, ...]


ONBOARDING_STEPS = (
    OnboardingStep(
        title="Welcome to AI Real Estate Intelligence",
        description=(
            "Your trusted platform for verified property data powered by AI. We combine "
            "an internal property database with external verification to give you "
            "reliable insights."
        ),
        features=("Natural language search", "AI-powered analysis", "Real-time verification"),
    ),
    OnboardingStep(
        title="Trust Through Transparency",
        description=(
            "Every property comes with a trust score showing data confidence. We verify "
            "information across multiple sources and highlight any gaps or anomalies."
        ),
        features=("Multi-source verification", "Confidence scoring", "Anomaly detection"),
    ),
    OnboardingStep(
        title="Interactive Property Discovery",
        description=(
            "Explore properties on an interactive map. Filter by status, class, and trust "
            "score to find exactly what you need."
        ),
        features=("Map-based browsing", "Advanced filters", "Save favorites"),
    ),
    OnboardingStep(
        title="Ask the AI Anything",
        description=(
            "Use natural language to ask complex questions about properties, markets, and "
            "risks. Get synthesized answers with cited sources."
        ),
        features=("Natural language queries", "Market analysis", "Risk assessment"),
    ),
    OnboardingStep(
        title="Stay Informed with Alerts",
        description=(
            "Track properties and get notified when changes are detected, like price "
            "updates, legal issues, or market shifts."
        ),
        features=("Automated monitoring", "Change detection", "Smart notifications"),
    ),
)


class OnboardingWizard:
    """Recorre los pasos del onboarding y persiste el resultado."""

    def __init__(self, repository: OnboardingRepository, steps=ONBOARDING_STEPS):
        self._repository = repository
        self.steps = steps
        self.index = 0
        self.completed = repository.has_completed()

    @property
    def current(self) -> OnboardingStep:
        return self.steps[self.index]

    @property
    def progress(self) -> float:
        """Fracción completada, contando el paso actual (1/5 ... 5/5)."""
        return (self.index + 1) / len(self.steps)

    @property
    def is_last(self) -> bool:
        return self.index == len(self.steps) - 1

    def next(self) -> bool:
        """
        Avanza un paso. En el último paso completa el onboarding.

        Returns:
            True si el onboarding quedó completado
        """
        if self.is_last:
            self._finish()
        else:
            self.index += 1
        return self.completed

    def skip(self) -> None:
        self._finish()

    def _finish(self) -> None:
        self._repository.complete()
        self.completed = True

"""
Shell de la aplicación.

Compone el catálogo, el store local y el asistente. El store se
inyecta y su ciclo de vida lo maneja el shell con start()/stop().

Flujo de una pregunta:
1. Seleccionar el contexto (estados + precio) sobre el catálogo
2. Consultar al asistente con ese subconjunto
3. Guardar pregunta y respuesta en el historial de chat
"""

from typing import Optional, Sequence

import structlog

from mirador.analysis import TrustLayerAssistant
from mirador.app.onboarding import OnboardingWizard
from mirador.config import Settings, get_settings
from mirador.models import (
    AIResponse,
    ChatMessage,
    PropertyAlert,
    PropertyRecord,
    StatusWeights,
    User,
)
from mirador.portfolio import (
    compare_properties,
    find_property,
    redistribute,
    search_properties,
    select_context,
    status_color,
    status_counts,
)
from mirador.storage import (
    AlertRepository,
    ChatHistoryRepository,
    KeyValueStore,
    OnboardingRepository,
    SavedPropertyRepository,
    SessionRepository,
)

logger = structlog.get_logger()


class AssistantShell:
    """
    Aplicación de exploración de propiedades.

    Uso:
        with AssistantShell(JsonFileStore(path), properties) as shell:
            shell.search("austin")
            response = await shell.ask("industrial in Texas over 5 million")
    """

    def __init__(
        self,
        store: KeyValueStore,
        properties: Sequence[PropertyRecord],
        assistant: Optional[TrustLayerAssistant] = None,
        settings: Optional[Settings] = None,
        weights: Optional[StatusWeights] = None,
    ):
        self.settings = settings or get_settings()
        self.store = store
        self._source = list(properties)
        self._properties: list[PropertyRecord] = list(properties)
        self._assistant = assistant
        self._weights = weights or StatusWeights.from_settings(self.settings)

        self.session_repo = SessionRepository(store)
        self.saved_repo = SavedPropertyRepository(store)
        self.alert_repo = AlertRepository(store)
        self.onboarding_repo = OnboardingRepository(store)
        self.chat_repo = ChatHistoryRepository(store)

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()

    def start(self) -> None:
        """
        Abre el store y prepara el catálogo.

        Raises:
            InvalidConfiguration: Si los pesos de estado configurados suman 0
        """
        # Primero los pesos: si son inválidos el store no queda abierto
        properties = redistribute(self._source, self._weights)
        self.store.open()
        self._properties = properties
        logger.info(
            "Shell iniciado",
            properties=len(self._properties),
            **{k.replace("-", "_"): v for k, v in status_counts(self._properties).items()},
        )

    def stop(self) -> None:
        self.store.close()
        logger.info("Shell detenido")

    @property
    def assistant(self) -> TrustLayerAssistant:
        if self._assistant is None:
            self._assistant = TrustLayerAssistant(settings=self.settings)
        return self._assistant

    # Catálogo

    @property
    def properties(self) -> list[PropertyRecord]:
        return list(self._properties)

    def get_property(self, property_id: str) -> PropertyRecord:
        item = find_property(property_id, self._properties)
        if item is None:
            raise KeyError(property_id)
        return item

    def search(self, query: str) -> list[PropertyRecord]:
        return search_properties(query, self._properties)

    def compare(self, property_ids: Sequence[str]) -> list[dict]:
        return compare_properties(property_ids, self._properties)

    def map_markers(self) -> list[dict]:
        """Datos para dibujar los marcadores: posición y color por estado."""
        markers = []
        for item in self._properties:
            extra = item.model_extra or {}
            markers.append({
                "id": item.id,
                "title": item.title,
                "lat": extra.get("lat"),
                "lng": extra.get("lng"),
                "status": item.status,
                "color": status_color(item.status),
            })
        return markers

    # Guardados

    def toggle_save(self, property_id: str) -> bool:
        """
        Guarda o quita una propiedad de favoritos.

        Returns:
            True si quedó guardada
        """
        self.get_property(property_id)
        if self.saved_repo.is_saved(property_id):
            self.saved_repo.unsave(property_id)
            return False
        self.saved_repo.save(property_id)
        return True

    def saved_properties(self) -> list[PropertyRecord]:
        """Propiedades guardadas que siguen existiendo en el catálogo."""
        by_id = {item.id: item for item in self._properties}
        return [
            by_id[entry.property_id]
            for entry in self.saved_repo.get_all()
            if entry.property_id in by_id
        ]

    # Alertas

    def alerts(self) -> list[PropertyAlert]:
        return self.alert_repo.get_all()

    def add_alert(self, property_id: str, alert_type: str, message: str) -> PropertyAlert:
        self.get_property(property_id)
        return self.alert_repo.add(property_id, alert_type, message)

    def mark_alert_read(self, alert_id: str) -> bool:
        return self.alert_repo.mark_as_read(alert_id)

    def unread_alert_count(self) -> int:
        return self.alert_repo.unread_count()

    # Sesión

    @property
    def current_user(self) -> Optional[User]:
        return self.session_repo.get_current_user()

    def login(self, email: str, name: str) -> User:
        return self.session_repo.login(email, name)

    def logout(self) -> None:
        self.session_repo.logout()

    def onboarding(self) -> OnboardingWizard:
        return OnboardingWizard(self.onboarding_repo)

    # Chat

    def chat_history(self) -> list[ChatMessage]:
        return self.chat_repo.get()

    def clear_chat(self) -> None:
        self.chat_repo.clear()

    async def ask(self, question: str) -> AIResponse:
        """
        Pregunta al asistente con el contexto filtrado del catálogo.

        Raises:
            ValueError: Si la pregunta está vacía
        """
        if not question or not question.strip():
            raise ValueError("La pregunta no puede estar vacía")

        user_message = ChatMessage(role="user", content=question)
        context = select_context(question, self._properties, self.settings.context_max_items)
        response = await self.assistant.ask(question, context)

        self.chat_repo.append(
            user_message,
            ChatMessage(role="assistant", content=response.answer),
        )
        return response

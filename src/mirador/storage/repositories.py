"""
Repositorios sobre el key-value store.

Cada repositorio maneja una clave/entidad específica.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from mirador.models import ChatMessage, PropertyAlert, SavedProperty, User
from mirador.storage.kv_store import KeyValueStore

logger = structlog.get_logger()

KEY_PREFIX = "realestate_ai_"

STORAGE_KEYS = {
    "user": f"{KEY_PREFIX}user",
    "saved_properties": f"{KEY_PREFIX}saved_properties",
    "alerts": f"{KEY_PREFIX}alerts",
    "collections": f"{KEY_PREFIX}collections",
    "onboarding": f"{KEY_PREFIX}onboarding",
    "chat_history": f"{KEY_PREFIX}chat_history",
}


class BaseRepository:
    """Clase base para repositorios."""

    KEY: str = ""

    def __init__(self, store: KeyValueStore):
        self._store = store

    @property
    def store(self) -> KeyValueStore:
        return self._store


class SessionRepository(BaseRepository):
    """Usuario actual del login demo."""

    KEY = STORAGE_KEYS["user"]

    def get_current_user(self) -> Optional[User]:
        data = self.store.get(self.KEY)
        if not data:
            return None
        try:
            return User.model_validate(data)
        except ValidationError:
            logger.warning("Usuario guardado inválido, se descarta")
            return None

    def set_current_user(self, user: User) -> None:
        self.store.set(self.KEY, user.model_dump())

    def login(self, email: str, name: str) -> User:
        """
        Login simulado (demo): crea y guarda un usuario.

        Raises:
            ValueError: Si falta el email o el nombre
        """
        if not email or not name:
            raise ValueError("Nombre y email son requeridos")
        user = User(email=email, name=name)
        self.set_current_user(user)
        logger.info("Usuario logueado", user_id=user.id)
        return user

    def logout(self) -> None:
        self.store.remove(self.KEY)

    def is_authenticated(self) -> bool:
        return self.get_current_user() is not None


class SavedPropertyRepository(BaseRepository):
    """Propiedades guardadas por el usuario."""

    KEY = STORAGE_KEYS["saved_properties"]

    def get_all(self) -> list[SavedProperty]:
        return [SavedProperty.model_validate(entry) for entry in self.store.get(self.KEY, [])]

    def _write(self, saved: list[SavedProperty]) -> None:
        self.store.set(self.KEY, [entry.model_dump() for entry in saved])

    def save(
        self,
        property_id: str,
        notes: Optional[str] = None,
        tags: Optional[list[str]] = None,
    ) -> SavedProperty:
        """Guarda una propiedad; si ya estaba, actualiza notas y tags."""
        saved = self.get_all()
        tags = tags or []

        for entry in saved:
            if entry.property_id == property_id:
                entry.notes = notes
                entry.tags = tags
                self._write(saved)
                return entry

        entry = SavedProperty(property_id=property_id, notes=notes, tags=tags)
        saved.append(entry)
        self._write(saved)
        logger.info("Propiedad guardada", property_id=property_id)
        return entry

    def unsave(self, property_id: str) -> None:
        saved = [entry for entry in self.get_all() if entry.property_id != property_id]
        self._write(saved)

    def is_saved(self, property_id: str) -> bool:
        return any(entry.property_id == property_id for entry in self.get_all())


class AlertRepository(BaseRepository):
    """Alertas, la más reciente primero."""

    KEY = STORAGE_KEYS["alerts"]

    def get_all(self) -> list[PropertyAlert]:
        return [PropertyAlert.model_validate(entry) for entry in self.store.get(self.KEY, [])]

    def _write(self, alerts: list[PropertyAlert]) -> None:
        self.store.set(self.KEY, [alert.model_dump() for alert in alerts])

    def add(self, property_id: str, alert_type: str, message: str) -> PropertyAlert:
        alerts = self.get_all()
        alert = PropertyAlert(property_id=property_id, type=alert_type, message=message)
        # Dos alertas en el mismo milisegundo tendrían el mismo id
        existing_ids = {a.id for a in alerts}
        suffix = 1
        base_id = alert.id
        while alert.id in existing_ids:
            alert.id = f"{base_id}-{suffix}"
            suffix += 1
        alerts.insert(0, alert)
        self._write(alerts)
        return alert

    def mark_as_read(self, alert_id: str) -> bool:
        """Marca una alerta como leída. Devuelve False si no existe."""
        alerts = self.get_all()
        for alert in alerts:
            if alert.id == alert_id:
                alert.read = True
                self._write(alerts)
                return True
        return False

    def unread_count(self) -> int:
        return sum(1 for alert in self.get_all() if not alert.read)


class OnboardingRepository(BaseRepository):
    """Flag de onboarding completado."""

    KEY = STORAGE_KEYS["onboarding"]

    def has_completed(self) -> bool:
        return self.store.get(self.KEY) == "true"

    def complete(self) -> None:
        self.store.set(self.KEY, "true")

    def reset(self) -> None:
        self.store.remove(self.KEY)


class ChatHistoryRepository(BaseRepository):
    """Historial del chat con el asistente."""

    KEY = STORAGE_KEYS["chat_history"]

    def get(self) -> list[ChatMessage]:
        raw = self.store.get(self.KEY, [])
        try:
            return [ChatMessage.model_validate(entry) for entry in raw]
        except (ValidationError, TypeError):
            logger.warning("Historial de chat inválido, se descarta")
            return []

    def save(self, messages: list[ChatMessage]) -> None:
        self.store.set(self.KEY, [message.model_dump() for message in messages])

    def append(self, *messages: ChatMessage) -> list[ChatMessage]:
        history = self.get()
        history.extend(messages)
        self.save(history)
        return history

    def clear(self) -> None:
        self.store.remove(self.KEY)

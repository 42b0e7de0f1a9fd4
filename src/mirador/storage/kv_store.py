"""
Key-value store local.

Reemplaza el `localStorage` del navegador por una interfaz explícita
que se inyecta en la aplicación, con ciclo de vida open/close.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

import structlog

logger = structlog.get_logger()


def _copy(value: Any) -> Any:
    """Copia vía JSON: el llamador nunca comparte referencias con el store."""
    return json.loads(json.dumps(value))


class KeyValueStore(ABC):
    """
    Interfaz del store.

    Los valores son cualquier cosa serializable a JSON. Usar el store
    cerrado es un error del llamador.
    """

    def __init__(self):
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def open(self) -> None:
        if self._is_open:
            return
        self._load()
        self._is_open = True

    def close(self) -> None:
        if not self._is_open:
            return
        self._flush()
        self._is_open = False

    def _ensure_open(self) -> None:
        if not self._is_open:
            raise RuntimeError(f"{self.__class__.__name__} no está abierto")

    def get(self, key: str, default: Any = None) -> Any:
        self._ensure_open()
        return self._get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._ensure_open()
        self._set(key, value)

    def remove(self, key: str) -> None:
        self._ensure_open()
        self._remove(key)

    def clear(self) -> None:
        self._ensure_open()
        self._clear()

    @abstractmethod
    def _load(self) -> None: ...

    @abstractmethod
    def _flush(self) -> None: ...

    @abstractmethod
    def _get(self, key: str, default: Any) -> Any: ...

    @abstractmethod
    def _set(self, key: str, value: Any) -> None: ...

    @abstractmethod
    def _remove(self, key: str) -> None: ...

    @abstractmethod
    def _clear(self) -> None: ...


class MemoryStore(KeyValueStore):
    """Store en memoria, para tests y sesiones efímeras."""

    def __init__(self, initial: Optional[dict] = None):
        super().__init__()
        self._data: dict[str, Any] = {k: _copy(v) for k, v in (initial or {}).items()}

    def _load(self) -> None:
        pass

    def _flush(self) -> None:
        pass

    def _get(self, key: str, default: Any) -> Any:
        if key not in self._data:
            return default
        return _copy(self._data[key])

    def _set(self, key: str, value: Any) -> None:
        self._data[key] = _copy(value)

    def _remove(self, key: str) -> None:
        self._data.pop(key, None)

    def _clear(self) -> None:
        self._data.clear()


class JsonFileStore(KeyValueStore):
    """
    Store persistido en un único archivo JSON.

    Se lee al abrir y se reescribe (atómicamente) en cada cambio.
    Un archivo corrupto se trata como vacío.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)
        self._data: dict[str, Any] = {}

    def _load(self) -> None:
        self._data = {}
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("Store corrupto, se inicia vacío", path=str(self.path), error=str(e))
            return
        if isinstance(data, dict):
            self._data = data
        else:
            logger.warning("Store con formato inválido, se inicia vacío", path=str(self.path))

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".store-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _get(self, key: str, default: Any) -> Any:
        if key not in self._data:
            return default
        return _copy(self._data[key])

    def _set(self, key: str, value: Any) -> None:
        self._data[key] = _copy(value)
        self._flush()

    def _remove(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._flush()

    def _clear(self) -> None:
        self._data = {}
        self._flush()

import threading
from typing import Any, Dict, Optional

from utils.logger import get_logger

logger = get_logger("CacheVistas")


class CacheVistas:
    """Cache en memoria de vistas por ruta. revalidar(ruta) descarta la entrada."""

    def __init__(self):
        self._vistas: Dict[str, Any] = {}
        self._lock = threading.Lock()

    def obtener(self, ruta: str) -> Optional[Any]:
        with self._lock:
            return self._vistas.get(ruta)

    def guardar(self, ruta: str, vista: Any):
        with self._lock:
            self._vistas[ruta] = vista

    def revalidar(self, ruta: str):
        with self._lock:
            descartada = self._vistas.pop(ruta, None)
        if descartada is not None:
            logger.debug(f"Vista revalidada: {ruta}")

    def __contains__(self, ruta: str) -> bool:
        with self._lock:
            return ruta in self._vistas

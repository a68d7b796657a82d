"""Agrupa ráfagas de llamadas en una sola ejecución diferida."""
import threading
from typing import Any, Callable, Optional

from utils.logger import get_logger

logger = get_logger("Debounce")


class Debouncer:
    """
    Programa una única ejecución `retardo` segundos después de la última llamada.

    Cada programar() cancela la ejecución pendiente anterior de esta misma
    instancia. Las ejecuciones de una instancia nunca se solapan.
    """

    def __init__(self, retardo: float):
        self.retardo = max(0.0, float(retardo))
        self.timer: Optional[threading.Timer] = None
        self._pendiente = None
        self._lock = threading.Lock()
        self._ejecucion = threading.Lock()

    @property
    def hay_pendiente(self) -> bool:
        with self._lock:
            return self._pendiente is not None

    def programar(self, fn: Callable[..., Any], *args, **kwargs):
        with self._lock:
            self._cancelar_timer()
            llamada = (fn, args, kwargs)
            self._pendiente = llamada
            self.timer = threading.Timer(self.retardo, self._disparar, args=(llamada,))
            self.timer.daemon = True
            self.timer.start()

    def cancelar_pendiente(self):
        with self._lock:
            self._cancelar_timer()
            self._pendiente = None

    def ejecutar_pendiente(self):
        """Ejecuta ya la llamada pendiente, si existe"""
        with self._lock:
            llamada = self._pendiente
            self._cancelar_timer()
        if llamada is not None:
            self._disparar(llamada, propagar=True)

    def _cancelar_timer(self):
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def _disparar(self, llamada, propagar: bool = False):
        """Desde el timer solo registra el error; en ejecutar_pendiente lo propaga"""
        with self._lock:
            # Reemplazada o cancelada mientras esperaba
            if self._pendiente is not llamada:
                return
            self._pendiente = None
            self.timer = None

        fn, args, kwargs = llamada
        with self._ejecucion:
            try:
                fn(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error en llamada diferida {getattr(fn, '__name__', fn)}: {e}", exc_info=True)
                if propagar:
                    raise


def debounce(callback: Callable[..., Any], retardo: float) -> Callable[..., None]:
    """
    Devuelve una función disparadora: cada invocación reprograma `callback`
    con los últimos argumentos. El disparador expone `cancelar` y `ejecutar`.
    """
    debouncer = Debouncer(retardo)

    def disparador(*args, **kwargs):
        debouncer.programar(callback, *args, **kwargs)

    disparador.cancelar = debouncer.cancelar_pendiente
    disparador.ejecutar = debouncer.ejecutar_pendiente
    disparador.debouncer = debouncer
    return disparador

"""
Cliente HTTP del servidor de transformaciones.

Implementa, sobre la API, los mismos métodos que ServicioCreditos y
ServicioImagenes, de modo que la sesión de formulario puede usar uno u otro.
Cada llamada es un único intento; los fallos se reportan como errores tipados.
"""
from typing import Any, Callable, Dict, Optional

import requests

from config import config
from utils.errores import (
    ErrorComunicacion,
    ErrorTransformacion,
    error_desde_codigo,
)
from utils.logger import get_logger

logger = get_logger("ClienteApi")

RUTA_INICIO = "/"


class ClienteApi:

    def __init__(self, base_url: str, token: Optional[str] = None, http=None, timeout: float = 30.0):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.http = http if http is not None else requests.Session()
        self.timeout = timeout

    @classmethod
    def desde_config(cls, token: Optional[str] = None, cliente_config=None) -> "ClienteApi":
        """Cliente apuntando a API_BASE_URL con el timeout configurado"""
        cliente_config = cliente_config or config.cliente
        return cls(cliente_config.base_url, token=token, timeout=cliente_config.timeout_segundos)

    # Créditos

    def ajustar(self, id_usuario: int, delta: int) -> int:
        """Solo débitos: el servidor identifica al usuario por el token"""
        if delta >= 0:
            raise ValueError("El cliente solo puede debitar créditos")
        respuesta = self._solicitar("POST", "/creditos/consumir", json={"cantidad": -delta})
        return respuesta["saldo"]

    def obtener_saldo(self) -> int:
        return self._solicitar("GET", "/creditos/saldo")["saldo"]

    # Imágenes

    def crear(self, imagen: Dict[str, Any], id_autor: int, ruta: str = RUTA_INICIO) -> Dict[str, Any]:
        return self._solicitar("POST", "/imagenes", json=_sin_identidad(imagen))

    def actualizar(self, imagen: Dict[str, Any], id_autor: int, ruta: Optional[str] = None) -> Dict[str, Any]:
        return self._solicitar("PUT", f"/imagenes/{imagen['_id']}", json=_sin_identidad(imagen))

    def obtener(self, id_imagen) -> Dict[str, Any]:
        return self._solicitar("GET", f"/imagenes/{id_imagen}")

    def eliminar(self, id_imagen, id_autor: Optional[int] = None):
        self._solicitar("DELETE", f"/imagenes/{id_imagen}", esperar_json=False)

    def _solicitar(self, metodo: str, ruta: str, json=None, esperar_json: bool = True):
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            respuesta = self.http.request(
                metodo,
                f"{self.base_url}{ruta}",
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{metodo} {ruta} falló: {e}")
            raise ErrorComunicacion(f"No se pudo contactar al servidor: {e}")

        if respuesta.status_code >= 400:
            raise self._error_de_respuesta(respuesta)

        if not esperar_json:
            return None
        return respuesta.json()

    @staticmethod
    def _error_de_respuesta(respuesta) -> ErrorTransformacion:
        try:
            detalle = respuesta.json().get("detail")
        except ValueError:
            detalle = None

        if isinstance(detalle, dict) and "codigo" in detalle:
            return error_desde_codigo(detalle["codigo"], detalle.get("mensaje", ""))

        if respuesta.status_code == 401:
            return error_desde_codigo("Unauthorized", str(detalle or "Se requiere iniciar sesión"))
        if respuesta.status_code == 422:
            return error_desde_codigo("ValidationFailed", str(detalle))
        return ErrorTransformacion(f"HTTP {respuesta.status_code}: {detalle}")


def _sin_identidad(imagen: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in imagen.items() if k not in ("_id", "author", "createdAt", "updatedAt")}


def eliminar_y_redirigir(persistencia, id_imagen, id_usuario: Optional[int], navegar: Callable[[str], None]):
    """Intenta eliminar y navega al inicio pase lo que pase"""
    try:
        persistencia.eliminar(id_imagen, id_usuario)
    except ErrorTransformacion as e:
        logger.warning(f"No se pudo eliminar la imagen {id_imagen}: {e.mensaje}")
    except Exception as e:
        logger.error(f"Error inesperado eliminando la imagen {id_imagen}: {e}", exc_info=True)
    finally:
        navegar(RUTA_INICIO)

"""
Sesión de formulario de transformación.

Acumula las ediciones del usuario en un borrador, lo aplica sobre la
configuración confirmada cobrando un crédito, y guarda el resultado como
registro de imagen.

    INACTIVA -> EDITANDO -> APLICACION_PENDIENTE -> APLICADA -> ENVIANDO -> GUARDADA

Todos los colaboradores se inyectan:
    ledger        ajustar(id_usuario, delta) -> nuevo saldo
    persistencia  crear(imagen, id_autor, ruta) / actualizar(imagen, id_autor, ruta)
    renderizador  construir_url(public_id, ancho, alto, config) -> url
    navegar       navegar(ruta)
    notificar     notificar(titulo, descripcion, tipo)
"""
import copy
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from config import config
from models.transformacion import (
    RELACIONES_ASPECTO,
    SUBCLAVES_CAMPO,
    config_por_defecto,
    obtener_tipo,
)
from services.renderizado import RenderizadorCloudinary
from utils.debounce import Debouncer
from utils.errores import (
    CargaFallida,
    ErrorTransformacion,
    ErrorValidacion,
    TransicionInvalida,
)
from utils.fusion import fusionar_configuracion
from utils.logger import get_logger

logger = get_logger("SesionTransformacion")

COSTO_APLICAR = 1
RUTA_INICIO_SESION = "/sign-in"


class EstadoSesion(str, Enum):
    INACTIVA = "idle"
    EDITANDO = "editing"
    APLICACION_PENDIENTE = "pending_apply"
    APLICADA = "applied"
    ENVIANDO = "submitting"
    GUARDADA = "saved"


class ModoAccion(str, Enum):
    AGREGAR = "Add"
    ACTUALIZAR = "Update"


@dataclass
class ResultadoAccion:
    exito: bool
    valor: Any = None
    error: Optional[ErrorTransformacion] = None

    @property
    def codigo(self) -> Optional[str]:
        return self.error.codigo if self.error else None

    @classmethod
    def ok(cls, valor=None) -> "ResultadoAccion":
        return cls(True, valor)

    @classmethod
    def fallo(cls, error: ErrorTransformacion) -> "ResultadoAccion":
        return cls(False, error=error)


def _notificar_en_log(titulo: str, descripcion: str, tipo: str):
    logger.info(f"[{tipo}] {titulo}: {descripcion}")


class SesionTransformacion:

    def __init__(
        self,
        accion: ModoAccion,
        tipo: str,
        id_usuario: int,
        ledger,
        persistencia,
        renderizador,
        navegar: Callable[[str], None],
        notificar: Optional[Callable[[str, str, str], None]] = None,
        datos: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
        saldo_creditos: Optional[int] = None,
        retardo_debounce: float = 1.0,
        costo_aplicar: int = COSTO_APLICAR,
    ):
        self.accion = ModoAccion(accion)
        self.definicion = obtener_tipo(tipo)
        self.tipo = tipo.value if isinstance(tipo, Enum) else tipo
        self.id_usuario = id_usuario
        self.ledger = ledger
        self.persistencia = persistencia
        self.renderizador = renderizador
        self.navegar = navegar
        self.notificar = notificar or _notificar_en_log
        self.saldo_creditos = saldo_creditos
        self.retardo_debounce = retardo_debounce
        self.costo_aplicar = costo_aplicar

        self.is_transforming = False
        self.is_submitting = False
        self.borrador: Optional[Dict[str, Any]] = None
        self._debouncers: Dict[str, Debouncer] = {}
        self._lock = threading.RLock()

        if self.accion == ModoAccion.ACTUALIZAR:
            if not datos or datos.get("_id") is None:
                raise ErrorValidacion("El modo Update requiere los datos del registro existente")
            self.id_imagen = datos["_id"]
            self.imagen = dict(datos)
            self.valores = {
                "title": datos.get("title", ""),
                "aspectRatio": datos.get("aspectRatio"),
                "color": datos.get("color"),
                "prompt": datos.get("prompt"),
                "publicId": datos.get("publicId", ""),
            }
            confirmada = config if config is not None else datos.get("config")
            self.estado = EstadoSesion.GUARDADA
        else:
            self.id_imagen = None
            self.imagen = dict(datos) if datos else {}
            self.valores = {"title": "", "aspectRatio": "", "color": "", "prompt": "", "publicId": ""}
            confirmada = config
            self.estado = EstadoSesion.INACTIVA

        self.config: Dict[str, Any] = copy.deepcopy(confirmada) if confirmada else {}

    @property
    def puede_aplicar(self) -> bool:
        """El botón Apply se habilita solo con borrador y sin operaciones en curso"""
        with self._lock:
            return bool(self.borrador) and not self.is_transforming and not self.is_submitting

    @property
    def puede_guardar(self) -> bool:
        with self._lock:
            return (
                self.estado in (EstadoSesion.APLICADA, EstadoSesion.GUARDADA)
                and not self.is_submitting
                and not self.is_transforming
            )

    # Ediciones

    def editar_titulo(self, titulo: str):
        with self._lock:
            self.valores["title"] = titulo

    def editar(self, campo: str, valor: str):
        """Edición de texto libre; se aplica al borrador tras el retardo del campo"""
        if campo not in self.definicion["campos"] or campo not in SUBCLAVES_CAMPO:
            raise ErrorValidacion(f"El campo '{campo}' no está activo para '{self.tipo}'")

        debouncer = self._debouncers.get(campo)
        if debouncer is None:
            debouncer = self._debouncers[campo] = Debouncer(self.retardo_debounce)
        debouncer.programar(self._aplicar_edicion, campo, valor)

    def _aplicar_edicion(self, campo: str, valor: str):
        subclave = SUBCLAVES_CAMPO[campo]
        with self._lock:
            previo = self.borrador or {}
            self.borrador = {
                **previo,
                self.tipo: {**(previo.get(self.tipo) or {}), subclave: valor},
            }
            self.valores[campo] = valor
            self._marcar_edicion()

    def confirmar_ediciones_pendientes(self):
        """Ejecuta ya las ediciones que esperan su retardo"""
        for debouncer in list(self._debouncers.values()):
            debouncer.ejecutar_pendiente()

    def descartar_ediciones_pendientes(self):
        for debouncer in self._debouncers.values():
            debouncer.cancelar_pendiente()

    def seleccionar_relacion_aspecto(self, clave: str):
        """Selección discreta del tipo fill: sin retardo"""
        if "aspectRatio" not in self.definicion["campos"]:
            raise ErrorValidacion(f"'{self.tipo}' no admite relación de aspecto")
        opcion = RELACIONES_ASPECTO.get(clave)
        if opcion is None:
            raise ErrorValidacion(f"Relación de aspecto desconocida: {clave}")

        with self._lock:
            self.imagen.update({
                "aspectRatio": opcion["aspectRatio"],
                "width": opcion["width"],
                "height": opcion["height"],
            })
            borrador = config_por_defecto(self.tipo)
            borrador[self.tipo].update({
                "aspectRatio": opcion["aspectRatio"],
                "width": opcion["width"],
                "height": opcion["height"],
            })
            self.borrador = borrador
            self.valores["aspectRatio"] = clave
            self._marcar_edicion()

    def _marcar_edicion(self):
        if self.estado not in (EstadoSesion.APLICACION_PENDIENTE, EstadoSesion.ENVIANDO):
            self.estado = EstadoSesion.EDITANDO

    # Carga de la imagen origen

    def registrar_carga_exitosa(self, resultado: Dict[str, Any]):
        """Consume {publicId, width, height, secureURL} del widget de carga"""
        with self._lock:
            self.imagen.update({
                "publicId": resultado["publicId"],
                "width": resultado.get("width"),
                "height": resultado.get("height"),
                "secureUrl": resultado.get("secureURL") or resultado.get("secureUrl"),
            })
            self.valores["publicId"] = resultado["publicId"]

            # Los tipos sin campos quedan listos para aplicar al tener imagen
            if not self.definicion["campos"]:
                self.borrador = config_por_defecto(self.tipo)
                self._marcar_edicion()

        self.notificar("Image uploaded successfully", "Apply a transformation to continue", "success")

    def registrar_error_carga(self, error: Any) -> CargaFallida:
        logger.warning(f"Error en la carga de imagen: {error}")
        self.notificar("Something went wrong while uploading", "please try again", "error")
        return CargaFallida(str(error))

    # Transiciones

    def aplicar(self) -> ResultadoAccion:
        """Fusiona el borrador y debita un crédito; ambos ocurren o ninguno"""
        with self._lock:
            if not self.puede_aplicar:
                return ResultadoAccion.fallo(TransicionInvalida("No hay transformación pendiente para aplicar"))
            self.is_transforming = True
            estado_previo = self.estado
            self.estado = EstadoSesion.APLICACION_PENDIENTE
            borrador = self.borrador
            nueva_config = fusionar_configuracion(borrador, self.config)

        try:
            saldo = self.ledger.ajustar(self.id_usuario, -self.costo_aplicar)
        except ErrorTransformacion as e:
            with self._lock:
                self.estado = estado_previo
                self.is_transforming = False
            logger.warning(f"Aplicación rechazada para usuario {self.id_usuario}: {e.mensaje}")
            self.notificar("Transformation not applied", e.mensaje, "error")
            return ResultadoAccion.fallo(e)
        except BaseException:
            with self._lock:
                self.estado = estado_previo
                self.is_transforming = False
            raise

        with self._lock:
            self.config = nueva_config
            self.saldo_creditos = saldo
            # Ediciones llegadas durante el débito quedan para el siguiente Apply
            if self.borrador is borrador:
                self.borrador = None
                self.estado = EstadoSesion.APLICADA
            else:
                self.estado = EstadoSesion.EDITANDO
            self.is_transforming = False

        logger.info(f"Transformación aplicada para usuario {self.id_usuario}; saldo {saldo}")
        return ResultadoAccion.ok(nueva_config)

    def construir_payload(self, url_transformacion: str) -> Dict[str, Any]:
        return {
            "title": self.valores["title"],
            "publicId": self.imagen.get("publicId") or self.valores["publicId"],
            "transformationType": self.tipo,
            "width": self.imagen.get("width") or 0,
            "height": self.imagen.get("height") or 0,
            "config": copy.deepcopy(self.config),
            "secureUrl": self.imagen.get("secureUrl"),
            "transformationUrl": url_transformacion,
            "aspectRatio": self.valores.get("aspectRatio") or None,
            "prompt": self.valores.get("prompt") or None,
            "color": self.valores.get("color") or None,
        }

    def guardar(self) -> ResultadoAccion:
        """Persiste el registro (Add o Update) y navega a su ubicación"""
        with self._lock:
            if self.is_submitting:
                return ResultadoAccion.fallo(TransicionInvalida("Ya hay un guardado en curso"))
            if not self.puede_guardar:
                return ResultadoAccion.fallo(
                    TransicionInvalida(f"No se puede guardar en estado '{self.estado.value}'")
                )

            error = self._validar_formulario()
            if error is not None:
                return ResultadoAccion.fallo(error)

            estado_previo = self.estado
            self.estado = EstadoSesion.ENVIANDO
            self.is_submitting = True

        try:
            url = self.renderizador.construir_url(
                self.imagen.get("publicId") or self.valores["publicId"],
                self.imagen.get("width"),
                self.imagen.get("height"),
                self.config,
            )
            payload = self.construir_payload(url)

            if self.accion == ModoAccion.AGREGAR:
                registro = self.persistencia.crear(payload, self.id_usuario, "/")
            else:
                payload["_id"] = self.id_imagen
                registro = self.persistencia.actualizar(
                    payload, self.id_usuario, f"/transformations/{self.id_imagen}"
                )
        except ErrorTransformacion as e:
            with self._lock:
                self.estado = estado_previo
                self.is_submitting = False
            logger.warning(f"No se pudo guardar la imagen: {e.mensaje}")
            self.notificar("Image not saved", e.mensaje, "error")
            return ResultadoAccion.fallo(e)
        except BaseException:
            with self._lock:
                self.estado = estado_previo
                self.is_submitting = False
            raise

        with self._lock:
            self.id_imagen = registro["_id"]
            self.accion = ModoAccion.ACTUALIZAR
            self.imagen.update({"_id": registro["_id"], "transformationUrl": url})
            self.estado = EstadoSesion.GUARDADA
            self.is_submitting = False

        self.navegar(f"/transformations/{registro['_id']}")
        return ResultadoAccion.ok(registro)

    def _validar_formulario(self) -> Optional[ErrorValidacion]:
        titulo = (self.valores.get("title") or "").strip()
        if len(titulo) < 2 or len(titulo) > 50:
            return ErrorValidacion("El título debe tener entre 2 y 50 caracteres")
        if not (self.imagen.get("publicId") or self.valores.get("publicId")):
            return ErrorValidacion("Se requiere una imagen origen")
        return None


def crear_sesion(
    accion: ModoAccion,
    tipo: str,
    usuario: Optional[Dict[str, Any]],
    navegar: Callable[[str], None],
    **kwargs,
) -> Optional[SesionTransformacion]:
    """
    Abre una sesión para el usuario resuelto por el proveedor de autenticación.
    Sin usuario redirige al inicio de sesión y no crea nada.

    Los parámetros no indicados se toman de config (renderizador Cloudinary,
    retardo de edición y costo por Apply).
    """
    if not usuario:
        navegar(RUTA_INICIO_SESION)
        return None

    if "renderizador" not in kwargs:
        kwargs["renderizador"] = RenderizadorCloudinary.desde_config(config.cloudinary)
    kwargs.setdefault("retardo_debounce", config.cliente.debounce_segundos)
    kwargs.setdefault("costo_aplicar", config.creditos.costo_transformacion)

    return SesionTransformacion(
        accion,
        tipo,
        usuario["id"],
        navegar=navegar,
        saldo_creditos=usuario.get("saldo_creditos"),
        **kwargs,
    )

"""
Servicio de persistencia de imágenes transformadas
"""
from typing import Any, Callable, Dict, Optional

from database import Database
from models.imagen import Imagen
from models.transformacion import obtener_tipo, validar_configuracion
from models.usuario import Usuario
from utils.errores import NoAutorizado, NoEncontrado, PropietarioNoEncontrado
from utils.logger import get_logger

logger = get_logger("ServicioImagenes")

RUTA_INICIO = "/"


def ruta_imagen(id_imagen) -> str:
    """Ubicación canónica de un registro"""
    return f"/transformations/{id_imagen}"


class ServicioImagenes:
    """
    Crea, actualiza, obtiene y elimina registros de imagen.

    Toda operación que modifica datos avisa a `revalidar(ruta)` para que la
    vista en caché de esa ruta se regenere.
    """

    def __init__(self, db: Database, revalidar: Optional[Callable[[str], None]] = None):
        self.db = db
        self.revalidar = revalidar or (lambda ruta: None)

    def crear(self, imagen: Dict[str, Any], id_autor: int, ruta: str = RUTA_INICIO) -> Dict[str, Any]:
        """Crea un registro nuevo con author = id_autor"""
        self._validar_payload(imagen)

        with self.db.sesion() as sesion:
            autor = sesion.get(Usuario, id_autor)
            if autor is None:
                logger.warning(f"Intento de crear imagen para usuario inexistente: {id_autor}")
                raise PropietarioNoEncontrado(f"Usuario {id_autor} no encontrado")

            nueva = Imagen(id_autor=autor.id_usuario)
            nueva.aplicar_payload(imagen)
            sesion.add(nueva)
            sesion.flush()
            sesion.refresh(nueva)
            documento = nueva.to_dict()

        logger.info(f"Imagen {documento['_id']} creada por usuario {id_autor}")
        self.revalidar(ruta)
        return documento

    def actualizar(self, imagen: Dict[str, Any], id_autor: int, ruta: Optional[str] = None) -> Dict[str, Any]:
        """Reemplaza los campos enviados del registro imagen['_id'] si pertenece a id_autor"""
        id_imagen = imagen.get("_id")
        if id_imagen is None:
            raise NoEncontrado("El payload no incluye _id")
        self._validar_payload(imagen)

        with self.db.sesion() as sesion:
            existente = sesion.get(Imagen, id_imagen)
            if existente is None:
                raise NoEncontrado(f"Imagen {id_imagen} no encontrada")

            if existente.id_autor != id_autor:
                logger.warning(
                    f"Usuario {id_autor} intentó modificar la imagen {id_imagen} "
                    f"de usuario {existente.id_autor}"
                )
                raise NoAutorizado(f"La imagen {id_imagen} no pertenece al usuario")

            existente.aplicar_payload(imagen)
            sesion.flush()
            sesion.refresh(existente)
            documento = existente.to_dict()

        logger.info(f"Imagen {id_imagen} actualizada por usuario {id_autor}")
        self.revalidar(ruta or ruta_imagen(id_imagen))
        return documento

    def obtener(self, id_imagen) -> Dict[str, Any]:
        """Retorna el registro con la proyección del autor"""
        with self.db.sesion() as sesion:
            imagen = sesion.get(Imagen, id_imagen)
            if imagen is None:
                raise NoEncontrado(f"Imagen {id_imagen} no encontrada")
            return imagen.to_dict()

    def eliminar(self, id_imagen, id_autor: Optional[int] = None):
        """Elimina el registro; con id_autor verifica además la propiedad"""
        with self.db.sesion() as sesion:
            imagen = sesion.get(Imagen, id_imagen)
            if imagen is None:
                raise NoEncontrado(f"Imagen {id_imagen} no encontrada")

            if id_autor is not None and imagen.id_autor != id_autor:
                logger.warning(f"Usuario {id_autor} intentó eliminar la imagen {id_imagen}")
                raise NoAutorizado(f"La imagen {id_imagen} no pertenece al usuario")

            sesion.delete(imagen)

        logger.info(f"Imagen {id_imagen} eliminada")
        self.revalidar(ruta_imagen(id_imagen))
        self.revalidar(RUTA_INICIO)

    @staticmethod
    def _validar_payload(imagen: Dict[str, Any]):
        if "transformationType" in imagen:
            obtener_tipo(imagen["transformationType"])
        if imagen.get("config") is not None:
            validar_configuracion(imagen["config"])

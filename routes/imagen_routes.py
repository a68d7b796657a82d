from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, validator
from sqlalchemy.exc import SQLAlchemyError
from typing import Any, Dict, Optional

from services.imagenes import RUTA_INICIO, ServicioImagenes, ruta_imagen
from routes.dependencias import error_http, obtener_servicio_imagenes, obtener_usuario_actual
from utils.errores import ErrorTransformacion
from utils.logger import get_logger

router = APIRouter(prefix="/imagenes", tags=["imagenes"])
logger = get_logger("ImagenRoutes")


class ImagenRequest(BaseModel):
    """Documento de imagen tal como lo envía el formulario"""
    title: str
    transformationType: str
    publicId: str
    secureUrl: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    config: Optional[Dict[str, Any]] = None
    transformationUrl: Optional[str] = None
    aspectRatio: Optional[str] = None
    color: Optional[str] = None
    prompt: Optional[str] = None

    @validator('title')
    def validate_title(cls, v):
        v = (v or "").strip()
        if len(v) < 2 or len(v) > 50:
            raise ValueError('El título debe tener entre 2 y 50 caracteres')
        return v

    @validator('publicId')
    def validate_public_id(cls, v):
        if not v:
            raise ValueError('Se requiere el publicId de la imagen origen')
        return v


def _cache(request: Request):
    return request.app.state.cache_vistas


@router.post("", status_code=status.HTTP_201_CREATED)
async def crear_imagen(
    payload: ImagenRequest,
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioImagenes = Depends(obtener_servicio_imagenes)
):
    """Crea el registro de imagen del usuario autenticado"""
    try:
        return servicio.crear(payload.model_dump(exclude_unset=True), usuario.id_usuario, RUTA_INICIO)
    except ErrorTransformacion as e:
        logger.warning(f"No se pudo crear imagen para usuario {usuario.id_usuario}: {e.mensaje}")
        raise error_http(e)


@router.put("/{id_imagen}")
async def actualizar_imagen(
    id_imagen: int,
    payload: ImagenRequest,
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioImagenes = Depends(obtener_servicio_imagenes)
):
    """Actualiza un registro propio"""
    imagen = {**payload.model_dump(exclude_unset=True), "_id": id_imagen}
    try:
        return servicio.actualizar(imagen, usuario.id_usuario, ruta_imagen(id_imagen))
    except ErrorTransformacion as e:
        logger.warning(f"No se pudo actualizar imagen {id_imagen}: {e.mensaje}")
        raise error_http(e)


@router.get("/{id_imagen}")
async def obtener_imagen(
    id_imagen: int,
    request: Request,
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioImagenes = Depends(obtener_servicio_imagenes)
):
    """Obtiene un registro con los datos públicos de su autor"""
    ruta = ruta_imagen(id_imagen)
    cache = _cache(request)

    vista = cache.obtener(ruta)
    if vista is not None:
        return vista

    try:
        vista = servicio.obtener(id_imagen)
    except ErrorTransformacion as e:
        raise error_http(e)

    cache.guardar(ruta, vista)
    return vista


@router.delete("/{id_imagen}")
async def eliminar_imagen(
    id_imagen: int,
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioImagenes = Depends(obtener_servicio_imagenes)
):
    """Intenta eliminar la imagen y redirige siempre al inicio"""
    try:
        servicio.eliminar(id_imagen, usuario.id_usuario)
    except ErrorTransformacion as e:
        logger.warning(f"No se pudo eliminar imagen {id_imagen}: {e.mensaje}")
    except SQLAlchemyError as e:
        logger.error(f"Error de base de datos eliminando imagen {id_imagen}: {e}")

    return RedirectResponse(url=RUTA_INICIO, status_code=status.HTTP_303_SEE_OTHER)

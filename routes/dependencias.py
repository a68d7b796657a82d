from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from services.autenticacion import ServicioAutenticacion
from services.creditos import ServicioCreditos
from services.imagenes import ServicioImagenes
from utils.errores import ErrorTransformacion
from utils.logger import get_logger

logger = get_logger("Dependencias")
security = HTTPBearer(auto_error=False)


def obtener_servicio_autenticacion(request: Request) -> ServicioAutenticacion:
    return request.app.state.servicio_autenticacion


def obtener_servicio_imagenes(request: Request) -> ServicioImagenes:
    return request.app.state.servicio_imagenes


def obtener_servicio_creditos(request: Request) -> ServicioCreditos:
    return request.app.state.servicio_creditos


async def verificar_token_dependencia(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> dict:
    """Dependencia para verificar token de autenticación"""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Se requiere iniciar sesión",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return ServicioAutenticacion.verificar_token(credentials.credentials)


async def obtener_usuario_actual(
    token_data: dict = Depends(verificar_token_dependencia),
    servicio: ServicioAutenticacion = Depends(obtener_servicio_autenticacion)
):
    """Obtiene el usuario actual basado en el token"""
    usuario = servicio.obtener_usuario_por_id(token_data.get("id"))

    if not usuario or not usuario.activo:
        logger.warning(f"Token válido para usuario inexistente o inactivo: {token_data.get('sub')}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Usuario no encontrado",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return usuario


def error_http(error: ErrorTransformacion) -> HTTPException:
    """Traduce un error tipado a HTTPException con detalle {codigo, mensaje}"""
    return HTTPException(status_code=error.status_code, detail=error.to_dict())

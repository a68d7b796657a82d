from fastapi import APIRouter, Depends
from pydantic import BaseModel, validator

from services.creditos import ServicioCreditos
from routes.dependencias import error_http, obtener_servicio_creditos, obtener_usuario_actual
from utils.errores import ErrorTransformacion
from utils.logger import get_logger

router = APIRouter(prefix="/creditos", tags=["creditos"])
logger = get_logger("CreditoRoutes")


class ConsumoRequest(BaseModel):
    cantidad: int = 1

    @validator('cantidad')
    def validate_cantidad(cls, v):
        if v < 1:
            raise ValueError('La cantidad a consumir debe ser al menos 1')
        return v


@router.get("/saldo")
async def obtener_saldo(
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioCreditos = Depends(obtener_servicio_creditos)
):
    try:
        return {"id_usuario": usuario.id_usuario, "saldo": servicio.obtener_saldo(usuario.id_usuario)}
    except ErrorTransformacion as e:
        raise error_http(e)


@router.post("/consumir")
async def consumir_creditos(
    consumo: ConsumoRequest,
    usuario = Depends(obtener_usuario_actual),
    servicio: ServicioCreditos = Depends(obtener_servicio_creditos)
):
    """Debita créditos del usuario autenticado; 402 si el saldo no alcanza"""
    try:
        nuevo_saldo = servicio.ajustar(usuario.id_usuario, -consumo.cantidad)
    except ErrorTransformacion as e:
        logger.warning(f"Consumo de {consumo.cantidad} créditos rechazado para usuario {usuario.id_usuario}: {e.mensaje}")
        raise error_http(e)

    return {"id_usuario": usuario.id_usuario, "saldo": nuevo_saldo}

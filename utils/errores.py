"""
Errores tipados del dominio de transformaciones.

Cada error tiene un código estable (usado en las respuestas HTTP y por el
cliente para reconstruir el tipo) y el status HTTP con el que se expone.
"""
from typing import Dict, Type


class ErrorTransformacion(Exception):
    codigo = "Error"
    status_code = 500

    def __init__(self, mensaje: str = ""):
        super().__init__(mensaje or self.codigo)
        self.mensaje = mensaje or self.codigo

    def to_dict(self) -> dict:
        return {"codigo": self.codigo, "mensaje": self.mensaje}


class NoEncontrado(ErrorTransformacion):
    codigo = "NotFound"
    status_code = 404


class PropietarioNoEncontrado(NoEncontrado):
    codigo = "OwnerNotFound"


class NoAutorizado(ErrorTransformacion):
    codigo = "Unauthorized"
    status_code = 403


class CreditoInsuficiente(ErrorTransformacion):
    codigo = "InsufficientCredit"
    status_code = 402


class CargaFallida(ErrorTransformacion):
    codigo = "UploadFailed"
    status_code = 400


class RenderizadoFallido(ErrorTransformacion):
    codigo = "RenderFailed"
    status_code = 502


class ErrorValidacion(ErrorTransformacion):
    codigo = "ValidationFailed"
    status_code = 400


class TransicionInvalida(ErrorTransformacion):
    codigo = "InvalidTransition"
    status_code = 409


class ErrorComunicacion(ErrorTransformacion):
    codigo = "ConnectionFailed"
    status_code = 503


ERRORES_POR_CODIGO: Dict[str, Type[ErrorTransformacion]] = {
    clase.codigo: clase
    for clase in (
        NoEncontrado,
        PropietarioNoEncontrado,
        NoAutorizado,
        CreditoInsuficiente,
        CargaFallida,
        RenderizadoFallido,
        ErrorValidacion,
        TransicionInvalida,
        ErrorComunicacion,
    )
}


def error_desde_codigo(codigo: str, mensaje: str = "") -> ErrorTransformacion:
    """Reconstruye el error tipado a partir de su código"""
    clase = ERRORES_POR_CODIGO.get(codigo, ErrorTransformacion)
    return clase(mensaje)

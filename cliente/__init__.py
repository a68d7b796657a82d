# Cliente del formulario de transformación
from .sesion_transformacion import (
    EstadoSesion,
    ModoAccion,
    ResultadoAccion,
    SesionTransformacion,
    crear_sesion,
)
from .api_cliente import ClienteApi, eliminar_y_redirigir

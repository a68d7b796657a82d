# Este archivo hace que el directorio models sea un paquete Python
from .usuario import Usuario
from .imagen import Imagen
from .log_sistema import LogSistema

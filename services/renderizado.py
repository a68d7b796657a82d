"""
Construcción de URLs de entrega transformadas sobre Cloudinary.

La URL se deriva únicamente de (public_id, ancho, alto, configuración):
mismas entradas, misma URL.
"""
from typing import Any, Dict, List, Optional

from cloudinary.utils import cloudinary_url

from utils.errores import RenderizadoFallido
from utils.logger import get_logger

logger = get_logger("Renderizador")


def _booleano(valor, por_defecto: bool = True) -> str:
    return "true" if (por_defecto if valor is None else bool(valor)) else "false"


def _texto(valor: str) -> str:
    return "_".join(str(valor).split())


def _activo(sub) -> bool:
    return isinstance(sub, dict) and sub.get("enabled", True) is not False


class RenderizadorCloudinary:

    def __init__(self, cloud_name: str, secure: bool = True):
        self.cloud_name = cloud_name
        self.secure = secure

    @classmethod
    def desde_config(cls, cloudinary_config) -> "RenderizadorCloudinary":
        return cls(cloudinary_config.cloud_name, secure=cloudinary_config.secure)

    def construir_url(
        self,
        public_id: str,
        ancho: Optional[int],
        alto: Optional[int],
        config: Optional[Dict[str, Any]],
    ) -> str:
        """Retorna la URL que codifica la transformación; un solo intento"""
        if not public_id:
            raise RenderizadoFallido("Falta el public_id del recurso origen")

        pasos = self.pasos_transformacion(config or {}, ancho, alto)

        try:
            url, _ = cloudinary_url(
                public_id,
                cloud_name=self.cloud_name,
                secure=self.secure,
                transformation=pasos,
            )
        except Exception as e:
            logger.error(f"Error construyendo URL para {public_id}: {e}")
            raise RenderizadoFallido(f"No se pudo construir la URL: {e}")

        logger.debug(f"URL de transformación para {public_id}: {url}")
        return url

    def pasos_transformacion(
        self,
        config: Dict[str, Any],
        ancho: Optional[int] = None,
        alto: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Un paso por tipo, siempre en el mismo orden"""
        pasos = []

        if _activo(config.get("restore")):
            pasos.append({"effect": "gen_restore"})

        if _activo(config.get("removeBackground")):
            pasos.append({"effect": "background_removal"})

        remove = config.get("remove")
        if remove:
            prompt = remove.get("prompt")
            if not prompt:
                raise RenderizadoFallido("La eliminación de objetos requiere un prompt")
            pasos.append({
                "effect": (
                    f"gen_remove:prompt_{_texto(prompt)};"
                    f"multiple_{_booleano(remove.get('multiple'))};"
                    f"remove-shadow_{_booleano(remove.get('removeShadow'))}"
                )
            })

        recolor = config.get("recolor")
        if recolor:
            prompt = recolor.get("prompt")
            color = recolor.get("to")
            if not prompt or not color:
                raise RenderizadoFallido("El recoloreado requiere prompt y color destino")
            pasos.append({
                "effect": (
                    f"gen_recolor:prompt_{_texto(prompt)};"
                    f"to-color_{_texto(color).lstrip('#')};"
                    f"multiple_{_booleano(recolor.get('multiple'))}"
                )
            })

        fill = config.get("fill")
        if fill is not None:
            paso = {"effect": "gen_fill", "crop": "pad"}
            if fill.get("aspectRatio"):
                paso["aspect_ratio"] = fill["aspectRatio"]
            if fill.get("width") or ancho:
                paso["width"] = fill.get("width") or ancho
            if fill.get("height") or alto:
                paso["height"] = fill.get("height") or alto
            pasos.append(paso)
        elif ancho and alto:
            pasos.append({"width": ancho, "height": alto, "crop": "limit"})

        return pasos

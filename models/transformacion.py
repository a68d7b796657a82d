"""
Catálogo de tipos de transformación y validación de configuraciones.

Una configuración es un diccionario indexado por tipo de transformación,
donde cada tipo aporta su propio sub-diccionario de parámetros:

    {"fill": {"aspectRatio": "1:1", "width": 1000, "height": 1000},
     "recolor": {"prompt": "car", "to": "red"}}
"""
import copy
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from utils.errores import ErrorValidacion


class TipoTransformacion(str, Enum):
    RESTORE = "restore"
    REMOVE_BACKGROUND = "removeBackground"
    FILL = "fill"
    REMOVE = "remove"
    RECOLOR = "recolor"


TIPOS_TRANSFORMACION: Dict[str, Dict[str, Any]] = {
    "restore": {
        "titulo": "Restore Image",
        "subtitulo": "Refine images by removing noise and imperfections",
        "campos": (),
        "config": {"restore": {"enabled": True}},
    },
    "removeBackground": {
        "titulo": "Background Remove",
        "subtitulo": "Removes the background of the image using AI",
        "campos": (),
        "config": {"removeBackground": {"enabled": True}},
    },
    "fill": {
        "titulo": "Generative Fill",
        "subtitulo": "Enhance an image's dimensions using AI outpainting",
        "campos": ("aspectRatio",),
        "config": {"fill": {}},
    },
    "remove": {
        "titulo": "Object Remove",
        "subtitulo": "Identify and eliminate objects from images",
        "campos": ("prompt",),
        "config": {"remove": {"prompt": "", "removeShadow": True, "multiple": True}},
    },
    "recolor": {
        "titulo": "Object Recolor",
        "subtitulo": "Identify and recolor objects from the image",
        "campos": ("prompt", "color"),
        "config": {"recolor": {"prompt": "", "to": "", "multiple": True}},
    },
}

RELACIONES_ASPECTO: Dict[str, Dict[str, Any]] = {
    "1:1": {"aspectRatio": "1:1", "label": "Square (1:1)", "width": 1000, "height": 1000},
    "3:4": {"aspectRatio": "3:4", "label": "Standard Portrait (3:4)", "width": 1000, "height": 1334},
    "9:16": {"aspectRatio": "9:16", "label": "Phone Portrait (9:16)", "width": 1000, "height": 1778},
}

# Campo del formulario -> sub-clave dentro de la configuración del tipo
SUBCLAVES_CAMPO = {
    "prompt": "prompt",
    "color": "to",
}


class ConfigRestaurar(BaseModel):
    enabled: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class ConfigQuitarFondo(BaseModel):
    enabled: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class ConfigRelleno(BaseModel):
    aspectRatio: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class ConfigEliminar(BaseModel):
    prompt: Optional[str] = None
    removeShadow: Optional[bool] = None
    multiple: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class ConfigRecolor(BaseModel):
    prompt: Optional[str] = None
    to: Optional[str] = None
    multiple: Optional[bool] = None

    model_config = ConfigDict(extra="forbid")


class Configuracion(BaseModel):
    restore: Optional[ConfigRestaurar] = None
    removeBackground: Optional[ConfigQuitarFondo] = None
    fill: Optional[ConfigRelleno] = None
    remove: Optional[ConfigEliminar] = None
    recolor: Optional[ConfigRecolor] = None

    model_config = ConfigDict(extra="forbid")


def obtener_tipo(tipo) -> Dict[str, Any]:
    """Devuelve la definición del tipo o lanza ErrorValidacion"""
    clave = tipo.value if isinstance(tipo, TipoTransformacion) else tipo
    definicion = TIPOS_TRANSFORMACION.get(clave)
    if definicion is None:
        raise ErrorValidacion(f"Tipo de transformación desconocido: {clave}")
    return definicion


def config_por_defecto(tipo) -> Dict[str, Any]:
    return copy.deepcopy(obtener_tipo(tipo)["config"])


def validar_configuracion(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Valida que cada clave sea un tipo conocido con sus campos tipados.
    Devuelve solo las claves presentes en la entrada (no agrega valores por defecto).
    """
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ErrorValidacion("La configuración debe ser un objeto")
    try:
        modelo = Configuracion.model_validate(config)
    except ValidationError as e:
        raise ErrorValidacion(f"Configuración inválida: {e}")
    return modelo.model_dump(exclude_unset=True)

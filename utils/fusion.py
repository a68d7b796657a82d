import copy
from collections.abc import Mapping
from typing import Any, Dict, Optional


def fusionar_configuracion(
    borrador: Optional[Mapping],
    confirmada: Optional[Mapping],
) -> Dict[str, Any]:
    """
    Combina un borrador sobre la configuración confirmada y devuelve una nueva.

    - Si ambos valores de una clave son diccionarios, se combinan recursivamente.
    - En cualquier otro caso gana el valor del borrador.
    - Las claves ausentes en el borrador se conservan de la confirmada.

    Un borrador None devuelve una copia de la confirmada; una confirmada None
    se trata como {}. Nunca modifica las entradas.
    """
    resultado = copy.deepcopy(dict(confirmada)) if confirmada is not None else {}
    if borrador is None:
        return resultado

    for clave, valor in borrador.items():
        actual = resultado.get(clave)
        if isinstance(valor, Mapping) and isinstance(actual, Mapping):
            resultado[clave] = fusionar_configuracion(valor, actual)
        else:
            resultado[clave] = copy.deepcopy(valor)
    return resultado

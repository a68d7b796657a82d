"""
Libro de créditos: ajusta el saldo de un usuario de forma atómica.
"""
from sqlalchemy import select, update

from database import Database
from models.usuario import Usuario
from utils.errores import CreditoInsuficiente, NoEncontrado
from utils.logger import get_logger

logger = get_logger("ServicioCreditos")


class ServicioCreditos:
    """
    El ajuste es un único UPDATE condicional (saldo + delta >= 0), así la
    base de datos serializa los ajustes concurrentes del mismo usuario y el
    saldo nunca queda negativo.
    """

    def __init__(self, db: Database):
        self.db = db

    def ajustar(self, id_usuario: int, delta: int) -> int:
        """Aplica `delta` al saldo y retorna el nuevo saldo"""
        delta = int(delta)

        with self.db.sesion() as sesion:
            sentencia = (
                update(Usuario)
                .where(Usuario.id_usuario == id_usuario)
                .where(Usuario.saldo_creditos + delta >= 0)
                .values(saldo_creditos=Usuario.saldo_creditos + delta)
                .execution_options(synchronize_session=False)
            )
            resultado = sesion.execute(sentencia)

            if resultado.rowcount == 0:
                saldo_actual = sesion.execute(
                    select(Usuario.saldo_creditos).where(Usuario.id_usuario == id_usuario)
                ).scalar_one_or_none()

                if saldo_actual is None:
                    logger.warning(f"Ajuste de créditos para usuario inexistente: {id_usuario}")
                    raise NoEncontrado(f"Usuario {id_usuario} no encontrado")

                logger.warning(
                    f"Créditos insuficientes para usuario {id_usuario}: "
                    f"saldo {saldo_actual}, ajuste {delta}"
                )
                raise CreditoInsuficiente(
                    f"Saldo insuficiente ({saldo_actual}) para un ajuste de {delta}"
                )

            nuevo_saldo = sesion.execute(
                select(Usuario.saldo_creditos).where(Usuario.id_usuario == id_usuario)
            ).scalar_one()

        logger.info(f"Créditos de usuario {id_usuario} ajustados en {delta}: nuevo saldo {nuevo_saldo}")
        return nuevo_saldo

    def obtener_saldo(self, id_usuario: int) -> int:
        with self.db.sesion() as sesion:
            saldo = sesion.execute(
                select(Usuario.saldo_creditos).where(Usuario.id_usuario == id_usuario)
            ).scalar_one_or_none()

        if saldo is None:
            raise NoEncontrado(f"Usuario {id_usuario} no encontrado")
        return saldo

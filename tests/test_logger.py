import logging

import pytest

from models.log_sistema import LogSistema
from utils.logger import DatabaseLogHandler


@pytest.fixture
def logger_con_bd(db):
    handler = DatabaseLogHandler(db)
    loggers = []

    def _logger(nombre):
        logger = logging.getLogger(nombre)
        logger.setLevel(logging.INFO)
        logger.addHandler(handler)
        loggers.append(logger)
        return logger

    yield _logger

    for logger in loggers:
        logger.removeHandler(handler)


def _registros(db):
    with db.sesion() as sesion:
        return [log.to_dict() for log in sesion.query(LogSistema).all()]


def test_persiste_advertencias(db, logger_con_bd):
    logger = logger_con_bd("ServicioPrueba")

    logger.info("solo consola")
    logger.warning("saldo agotado")

    registros = _registros(db)
    assert len(registros) == 1
    assert registros[0]["nivel"] == "warning"
    assert registros[0]["mensaje"] == "saldo agotado"
    assert registros[0]["modulo"] == "ServicioPrueba"
    assert registros[0]["hilo"]


def test_ignora_logs_de_acceso_a_datos(db, logger_con_bd):
    logger_con_bd("Database.pool").error("conexión perdida")

    assert _registros(db) == []


def test_fallo_de_bd_no_propaga(monkeypatch):
    class _BdCaida:
        def sesion(self):
            raise RuntimeError("sin conexión")

    monkeypatch.setattr(logging, "raiseExceptions", False)
    logger = logging.getLogger("ServicioSinBd")
    handler = DatabaseLogHandler(_BdCaida())
    logger.addHandler(handler)
    try:
        logger.error("no debería propagarse")
    finally:
        logger.removeHandler(handler)

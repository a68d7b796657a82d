import logging
import sys
import os
from datetime import datetime
from typing import Optional

FORMATO_LOG = '[%(asctime)s] [%(levelname)s] [%(name)s] [%(threadName)s]: %(message)s'

def setup_logging(log_dir: Optional[str] = "logs", nivel: int = logging.INFO, db=None):
    """Configuración centralizada del logging.

    log_dir=None desactiva el archivo diario; con `db` se agrega el handler
    que persiste los registros en la tabla logs_sistema.
    """
    formatter = logging.Formatter(FORMATO_LOG, datefmt='%Y-%m-%d %H:%M:%S')

    root_logger = logging.getLogger()
    root_logger.setLevel(nivel)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"servidor_{datetime.now().strftime('%Y%m%d')}.log")
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if db is not None:
        db_handler = DatabaseLogHandler(db, nivel=logging.WARNING)
        db_handler.setFormatter(logging.Formatter('%(message)s'))
        root_logger.addHandler(db_handler)

def get_logger(name: str) -> logging.Logger:
    """Retorna un logger configurado con el nombre especificado"""
    return logging.getLogger(name)

class DatabaseLogHandler(logging.Handler):
    """Handler personalizado para guardar logs en base de datos"""

    # Los logs del propio acceso a datos no se persisten
    MODULOS_EXCLUIDOS = ("Database", "sqlalchemy")

    def __init__(self, db, nivel: int = logging.WARNING):
        super().__init__(level=nivel)
        self.db = db

    def emit(self, record):
        if record.name.startswith(self.MODULOS_EXCLUIDOS):
            return
        try:
            from models.log_sistema import LogSistema

            log_entry = LogSistema(
                nivel=record.levelname.lower(),
                mensaje=self.format(record),
                modulo=record.name,
                hilo=record.threadName,
                fecha_hora=datetime.fromtimestamp(record.created)
            )

            with self.db.sesion() as sesion:
                sesion.add(log_entry)

        except Exception:
            self.handleError(record)

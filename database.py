from sqlalchemy import create_engine, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
import logging

logger = logging.getLogger("Database")

Base = declarative_base()


class Database:
    """Manejador de conexión: engine + fábrica de sesiones.

    Se crea una instancia por aplicación y se pasa explícitamente a los
    servicios que la necesitan.
    """

    def __init__(self, url: str, pool_size: int = 10, max_overflow: int = 20, echo: bool = False):
        self.url = url
        opciones = {"echo": echo, "pool_pre_ping": True}

        if url.startswith("sqlite"):
            opciones["connect_args"] = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                opciones["poolclass"] = StaticPool
        else:
            opciones["pool_size"] = pool_size
            opciones["max_overflow"] = max_overflow

        self.engine = create_engine(url, **opciones)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def sesion(self) -> Session:
        """Context manager para obtener sesión de base de datos"""
        db = self.SessionLocal()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"Error en transacción: {str(e)}")
            raise
        finally:
            db.close()

    def init_db(self):
        """Inicializa las tablas en la base de datos"""
        try:
            Base.metadata.create_all(bind=self.engine)
            logger.info("Tablas creadas/inicializadas")
        except Exception as e:
            logger.error(f"Error inicializando base de datos: {e}")
            raise

    def test_connection(self):
        """Probar conexión a la base de datos"""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Conexión a base de datos exitosa")
        except Exception as e:
            logger.error(f"Error conectando a base de datos: {str(e)}")
            raise

    def dispose(self):
        self.engine.dispose()


# Registro de modelos en Base.metadata
import models.usuario  # noqa: E402,F401
import models.imagen  # noqa: E402,F401
import models.log_sistema  # noqa: E402,F401

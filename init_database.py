from config import config
from database import Database
from utils.logger import get_logger, setup_logging

logger = get_logger("DatabaseInit")

def main():
    setup_logging(log_dir=None)
    logger.info("Inicializando base de datos...")
    db = Database(config.get_db_url())
    try:
        db.init_db()
        logger.info("Tablas creadas exitosamente")

        db.test_connection()
        logger.info("Base de datos inicializada correctamente")

    except Exception as e:
        logger.error(f"Error inicializando base de datos: {e}")
        raise
    finally:
        db.dispose()

if __name__ == "__main__":
    main()

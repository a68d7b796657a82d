from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from config import config as config_global, AppConfig
from database import Database
from routes import auth_routes, credito_routes, imagen_routes
from services.autenticacion import ServicioAutenticacion
from services.creditos import ServicioCreditos
from services.imagenes import ServicioImagenes
from utils.cache_vistas import CacheVistas
from utils.logger import get_logger

logger = get_logger("MainApp")


def crear_app(config: AppConfig = config_global, db: Optional[Database] = None) -> FastAPI:
    """Construye la aplicación con sus servicios conectados a `db`"""
    if db is None:
        db = Database(
            config.get_db_url(),
            pool_size=config.db.pool_size,
            max_overflow=config.db.max_overflow,
            echo=config.debug
        )

    app = FastAPI(
        title="Servidor de Transformaciones de Imágenes",
        description="Registros de imágenes transformadas y créditos de usuario",
        version="1.0.0"
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.security.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Servicios compartidos por las rutas
    cache_vistas = CacheVistas()
    app.state.config = config
    app.state.db = db
    app.state.cache_vistas = cache_vistas
    app.state.servicio_autenticacion = ServicioAutenticacion(db, saldo_inicial=config.creditos.saldo_inicial)
    app.state.servicio_creditos = ServicioCreditos(db)
    app.state.servicio_imagenes = ServicioImagenes(db, revalidar=cache_vistas.revalidar)

    # Routers
    app.include_router(auth_routes.router)
    app.include_router(imagen_routes.router)
    app.include_router(credito_routes.router)

    @app.on_event("startup")
    async def startup_event():
        """Inicialización al arrancar la aplicación"""
        logger.info("Iniciando servidor de transformaciones...")
        db.init_db()
        db.test_connection()
        logger.info("✓ Base de datos inicializada y conexión verificada")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Limpieza al cerrar la aplicación"""
        logger.info("Cerrando servidor de transformaciones...")
        db.dispose()

    @app.get("/")
    async def root():
        return {
            "message": "Servidor de transformaciones funcionando correctamente",
            "version": "1.0.0",
            "endpoints": {
                "auth": "/auth",
                "imagenes": "/imagenes",
                "creditos": "/creditos"
            }
        }

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "servidor_transformaciones",
            "version": "1.0.0"
        }

    return app


if __name__ == "__main__":
    from utils.logger import setup_logging

    db_principal = Database(config_global.get_db_url(), echo=config_global.debug)
    setup_logging(config_global.log_dir, db=db_principal if config_global.log_en_bd else None)

    uvicorn.run(
        crear_app(config_global, db_principal),
        host=config_global.host,
        port=config_global.port,
        log_level="info"
    )

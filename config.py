import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Cargar variables de entorno
load_dotenv()

@dataclass
class DatabaseConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    pool_size: int = 10
    max_overflow: int = 20
    url: Optional[str] = None  # Si se define, reemplaza a los campos anteriores

@dataclass
class JWTConfig:
    secret_key: str = os.getenv("JWT_SECRET_KEY", "clave-super-segura-minimo-32-caracteres-aqui-123456789")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 120

@dataclass
class SecurityConfig:
    allowed_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])

@dataclass
class CloudinaryConfig:
    cloud_name: str = os.getenv("CLOUDINARY_CLOUD_NAME", "demo")
    secure: bool = True

@dataclass
class CreditosConfig:
    saldo_inicial: int = int(os.getenv("CREDITOS_SALDO_INICIAL", "10"))
    costo_transformacion: int = 1

@dataclass
class ClienteConfig:
    base_url: str = os.getenv("API_BASE_URL", "http://localhost:8080")
    debounce_segundos: float = 1.0
    timeout_segundos: float = 30.0

@dataclass
class AppConfig:
    # Configuración servidor
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = os.getenv("APP_DEBUG", "false").lower() == "true"

    # Base de datos de imágenes y usuarios
    db: DatabaseConfig = field(default_factory=lambda: DatabaseConfig(
        host=os.getenv("DB_HOST", "localhost"),
        port=int(os.getenv("DB_PORT", "3306")),
        user=os.getenv("DB_USER", "avnadmin"),
        password=os.getenv("DB_PASSWORD", ""),
        database=os.getenv("DB_NAME", "TransformacionesDB"),
        url=os.getenv("DATABASE_URL") or None
    ))

    # Configuraciones adicionales
    jwt: JWTConfig = field(default_factory=JWTConfig)
    security: SecurityConfig = field(default_factory=SecurityConfig)
    cloudinary: CloudinaryConfig = field(default_factory=CloudinaryConfig)
    creditos: CreditosConfig = field(default_factory=CreditosConfig)
    cliente: ClienteConfig = field(default_factory=ClienteConfig)

    # Logging
    log_dir: str = "logs"
    log_en_bd: bool = False

    def get_db_url(self) -> str:
        """Genera la URL de conexión para la base de datos"""
        if self.db.url:
            return self.db.url
        return f"mysql+pymysql://{self.db.user}:{self.db.password}@{self.db.host}:{self.db.port}/{self.db.database}"

# Configuración global
config = AppConfig()

from datetime import datetime
from typing import Optional, Dict, Any
from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from database import Database
from models.usuario import Usuario
from utils.seguridad import SeguridadUtils
from utils.logger import get_logger

logger = get_logger("ServicioAutenticacion")

class ServicioAutenticacion:

    def __init__(self, db: Database, saldo_inicial: int = 0):
        self.db = db
        self.saldo_inicial = saldo_inicial

    @staticmethod
    def verificar_token(token: str) -> Dict[str, Any]:
        """Verifica y decodifica el token JWT"""
        payload = SeguridadUtils.verificar_token_acceso(token)
        if not payload or payload.get("tipo") != "acceso":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token de acceso invalido o expirado",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return payload

    def obtener_usuario_por_id(self, user_id: int) -> Optional[Usuario]:
        """Obtiene usuario por ID"""
        with self.db.sesion() as sesion:
            return sesion.get(Usuario, user_id)

    def obtener_usuario_por_email(self, email: str) -> Optional[Usuario]:
        """Obtiene usuario por email"""
        with self.db.sesion() as sesion:
            return sesion.query(Usuario).filter(Usuario.email == email).first()

    def autenticar_usuario(self, email: str, password: str) -> Optional[Dict[str, Any]]:
        """Autentica usuario y registra el último login"""
        with self.db.sesion() as sesion:
            usuario = sesion.query(Usuario).filter(Usuario.email == email).first()

            if not usuario:
                logger.warning(f"Intento de login con email no registrado: {email}")
                return None

            if not SeguridadUtils.verificar_password(password, usuario.contraseña):
                logger.warning(f"Contraseña incorrecta para usuario: {email}")
                return None

            usuario.ultimo_login = datetime.now()

            return {
                'id_usuario': usuario.id_usuario,
                'nombre': usuario.nombre,
                'apellido': usuario.apellido,
                'email': usuario.email,
            }

    def registrar_usuario(self, nombre: str, apellido: str, email: str, password: str) -> Dict[str, Any]:
        """Registra nuevo usuario con el saldo inicial de créditos"""
        if not SeguridadUtils.validar_formato_email(email):
            return {"success": False, "error": "Formato de email invalido"}

        es_segura, mensaje = SeguridadUtils.validar_fortaleza_password(password)
        if not es_segura:
            return {"success": False, "error": mensaje}

        if self.obtener_usuario_por_email(email):
            return {"success": False, "error": "El email ya esta registrado"}

        try:
            with self.db.sesion() as sesion:
                nuevo_usuario = Usuario(
                    nombre=nombre,
                    apellido=apellido,
                    email=email,
                    contraseña=SeguridadUtils.get_password_hash(password),
                    saldo_creditos=self.saldo_inicial
                )
                sesion.add(nuevo_usuario)
                sesion.flush()
                user_id = nuevo_usuario.id_usuario
        except SQLAlchemyError as e:
            logger.error(f"Error registrando usuario {email}: {e}")
            return {"success": False, "error": "Error interno del servidor"}

        logger.info(f"Usuario registrado exitosamente: {email}")
        return {
            "success": True,
            "user_id": user_id,
            "message": "Usuario registrado exitosamente"
        }

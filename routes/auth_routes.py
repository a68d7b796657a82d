from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr, validator
from typing import Optional, Dict, Any
from services.autenticacion import ServicioAutenticacion
from routes.dependencias import obtener_servicio_autenticacion, obtener_usuario_actual
from utils.seguridad import SeguridadUtils
from utils.logger import get_logger

router = APIRouter(prefix="/auth", tags=["autenticacion"])
logger = get_logger("AuthRoutes")

# Modelos Pydantic
class LoginRequest(BaseModel):
    email: EmailStr
    password: str

    @validator('password')
    def validate_password(cls, v):
        if not v or len(v) < 6:
            raise ValueError('La contraseña debe tener al menos 6 caracteres')
        return v

class RegistroRequest(BaseModel):
    nombre: str
    apellido: str = ""
    email: EmailStr
    password: str

    @validator('nombre')
    def validate_nombre(cls, v):
        if not v or len(v.strip()) < 2:
            raise ValueError('El nombre debe tener al menos 2 caracteres')
        return v.strip()

    @validator('apellido')
    def validate_apellido(cls, v):
        return (v or "").strip()

    @validator('password')
    def validate_password(cls, v):
        if not v or len(v) < 6:
            raise ValueError('La contraseña debe tener al menos 6 caracteres')
        return v

class UsuarioResponse(BaseModel):
    id: int
    nombre: str
    apellido: str
    email: str
    saldo_creditos: int
    fecha_registro: Optional[str] = None

@router.post("/login", response_model=Dict[str, Any])
async def login(
    login_data: LoginRequest,
    servicio: ServicioAutenticacion = Depends(obtener_servicio_autenticacion)
):
    """Endpoint para login de usuarios"""
    logger.info(f"Intento de login para: {login_data.email}")

    usuario = servicio.autenticar_usuario(login_data.email, login_data.password)

    if not usuario:
        logger.warning(f"Intento de login fallido para: {login_data.email}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Credenciales incorrectas",
            headers={"WWW-Authenticate": "Bearer"},
        )

    tokens = SeguridadUtils.crear_tokens_autenticacion(
        email=login_data.email,
        user_id=usuario['id_usuario']
    )

    logger.info(f"Login exitoso para usuario: {login_data.email}")

    return {
        **tokens,
        "usuario": {
            "id": usuario['id_usuario'],
            "nombre": usuario['nombre'],
            "apellido": usuario['apellido'],
            "email": usuario['email'],
        }
    }

@router.post("/registro", response_model=Dict[str, Any], status_code=status.HTTP_201_CREATED)
async def registro(
    registro_data: RegistroRequest,
    servicio: ServicioAutenticacion = Depends(obtener_servicio_autenticacion)
):
    """Endpoint para registro de nuevos usuarios"""
    logger.info(f"Intento de registro para: {registro_data.email}")

    resultado = servicio.registrar_usuario(
        registro_data.nombre,
        registro_data.apellido,
        registro_data.email,
        registro_data.password
    )

    if not resultado.get("success", False):
        logger.warning(f"Registro fallido para {registro_data.email}: {resultado.get('error')}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=resultado.get("error", "Error en el registro")
        )

    return {
        "success": True,
        "message": "Usuario registrado exitosamente",
        "user_id": resultado["user_id"],
        "email": registro_data.email
    }

@router.get("/me", response_model=UsuarioResponse)
async def obtener_usuario_actual_endpoint(usuario = Depends(obtener_usuario_actual)):
    """Obtiene informacion del usuario actual, incluido su saldo de créditos"""
    return UsuarioResponse(
        id=usuario.id_usuario,
        nombre=usuario.nombre,
        apellido=usuario.apellido or "",
        email=usuario.email,
        saldo_creditos=usuario.saldo_creditos,
        fecha_registro=usuario.fecha_registro.isoformat() if usuario.fecha_registro else None
    )

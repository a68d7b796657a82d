from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint
from sqlalchemy.sql import func
from database import Base

class Usuario(Base):
    __tablename__ = "usuarios"
    __table_args__ = (
        CheckConstraint("saldo_creditos >= 0", name="ck_usuarios_saldo_no_negativo"),
    )

    id_usuario = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String(100), nullable=False)
    apellido = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=False)
    contraseña = Column(String(255), nullable=False)
    saldo_creditos = Column(Integer, nullable=False, default=0)
    fecha_registro = Column(DateTime, default=func.now())
    ultimo_login = Column(DateTime)
    activo = Column(Integer, default=1)

    def proyeccion_autor(self) -> dict:
        """Campos públicos del autor de una imagen (sin credenciales ni saldo)"""
        return {
            "_id": self.id_usuario,
            "firstName": self.nombre,
            "lastName": self.apellido,
        }

from sqlalchemy import Column, Integer, String, DateTime, Text
from database import Base

class LogSistema(Base):
    """Registro de log persistido por DatabaseLogHandler"""
    __tablename__ = "logs_sistema"

    id_log = Column(Integer, primary_key=True, index=True)
    nivel = Column(String(20), nullable=False, index=True)
    mensaje = Column(Text, nullable=False)
    modulo = Column(String(100), nullable=False)
    hilo = Column(String(100))
    fecha_hora = Column(DateTime, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id_log": self.id_log,
            "nivel": self.nivel,
            "mensaje": self.mensaje,
            "modulo": self.modulo,
            "hilo": self.hilo,
            "fecha_hora": self.fecha_hora.isoformat() if self.fecha_hora else None,
        }

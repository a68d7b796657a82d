"""
Modelo de registro de imagen transformada
"""
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from database import Base


# Clave del documento JSON -> atributo de la tabla
CAMPOS_REGISTRO = {
    "title": "titulo",
    "transformationType": "tipo_transformacion",
    "publicId": "public_id",
    "secureUrl": "secure_url",
    "width": "ancho",
    "height": "alto",
    "config": "config",
    "transformationUrl": "url_transformacion",
    "aspectRatio": "relacion_aspecto",
    "color": "color",
    "prompt": "prompt",
}


class Imagen(Base):
    """
    Imagen con su configuración de transformación confirmada.
    El autor se fija al crear el registro y no cambia después.
    """
    __tablename__ = "imagenes"

    id_imagen = Column(Integer, primary_key=True, autoincrement=True)
    titulo = Column(String(100), nullable=False)
    tipo_transformacion = Column(String(30), nullable=False, index=True)

    # Recurso origen (widget de carga)
    public_id = Column(String(255), nullable=False)
    secure_url = Column(Text)
    ancho = Column(Integer)
    alto = Column(Integer)

    # Transformación
    config = Column(JSON)
    url_transformacion = Column(Text)

    # Desnormalizados para mostrar rápido
    relacion_aspecto = Column(String(10))
    color = Column(String(50))
    prompt = Column(String(255))

    id_autor = Column(Integer, ForeignKey("usuarios.id_usuario"), nullable=False, index=True)
    autor = relationship("Usuario", lazy="joined")

    fecha_creacion = Column(DateTime, default=func.now(), nullable=False)
    fecha_actualizacion = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    def aplicar_payload(self, payload: dict):
        """Copia los campos conocidos del documento; ignora _id y author"""
        for clave, atributo in CAMPOS_REGISTRO.items():
            if clave in payload:
                setattr(self, atributo, payload[clave])

    def to_dict(self, incluir_autor: bool = True) -> dict:
        """Convierte el objeto al documento JSON del registro"""
        documento = {"_id": self.id_imagen}
        for clave, atributo in CAMPOS_REGISTRO.items():
            documento[clave] = getattr(self, atributo)

        if incluir_autor and self.autor is not None:
            documento["author"] = self.autor.proyeccion_autor()
        else:
            documento["author"] = {"_id": self.id_autor}

        documento["createdAt"] = self.fecha_creacion.isoformat() if self.fecha_creacion else None
        documento["updatedAt"] = self.fecha_actualizacion.isoformat() if self.fecha_actualizacion else None
        return documento

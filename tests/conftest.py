"""
Fixtures compartidas: base SQLite por test, usuarios sembrados,
temporizadores falsos y cliente HTTP de la aplicación.
"""
import itertools

import pytest
from fastapi.testclient import TestClient

from config import AppConfig
from database import Database
from main import crear_app
from models.usuario import Usuario
from services.creditos import ServicioCreditos
from services.imagenes import ServicioImagenes
from services.renderizado import RenderizadorCloudinary
from utils import debounce as debounce_module
from utils.seguridad import SeguridadUtils

_emails = itertools.count(1)


@pytest.fixture
def db(tmp_path):
    base = Database(f"sqlite:///{tmp_path / 'transformaciones.db'}")
    base.init_db()
    yield base
    base.dispose()


@pytest.fixture
def crear_usuario(db):
    """Crea un usuario y retorna su id"""

    def _crear(nombre="Ana", apellido="Lopez", saldo=10, password="secreto123", email=None):
        email = email or f"{nombre.lower()}{next(_emails)}@fotos.com"
        with db.sesion() as sesion:
            usuario = Usuario(
                nombre=nombre,
                apellido=apellido,
                email=email,
                contraseña=SeguridadUtils.get_password_hash(password),
                saldo_creditos=saldo,
            )
            sesion.add(usuario)
            sesion.flush()
            return usuario.id_usuario

    return _crear


@pytest.fixture
def saldo_de(db):
    def _saldo(id_usuario):
        with db.sesion() as sesion:
            return sesion.get(Usuario, id_usuario).saldo_creditos

    return _saldo


@pytest.fixture
def servicio_creditos(db):
    return ServicioCreditos(db)


@pytest.fixture
def rutas_revalidadas():
    return []


@pytest.fixture
def servicio_imagenes(db, rutas_revalidadas):
    return ServicioImagenes(db, revalidar=rutas_revalidadas.append)


@pytest.fixture
def renderizador():
    return RenderizadorCloudinary("demo")


class FakeTimer:
    def __init__(self, interval, function, args=None, kwargs=None):
        self.interval = interval
        self.function = function
        self.args = args or ()
        self.kwargs = kwargs or {}
        self.started = False
        self.cancelled = False
        self.daemon = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if self.started and not self.cancelled:
            self.function(*self.args, **self.kwargs)


@pytest.fixture
def fake_timers(monkeypatch):
    """Reemplaza threading.Timer en utils.debounce y retorna los timers creados"""
    timers = []

    def _fabrica(interval, function, args=None, kwargs=None):
        timer = FakeTimer(interval, function, args, kwargs)
        timers.append(timer)
        return timer

    monkeypatch.setattr(debounce_module.threading, "Timer", _fabrica)
    return timers


@pytest.fixture
def app(db):
    return crear_app(AppConfig(), db)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def headers_de():
    """Cabecera Authorization para un usuario sembrado"""

    def _headers(id_usuario, email="usuario@fotos.com"):
        tokens = SeguridadUtils.crear_tokens_autenticacion(email, id_usuario)
        return {"Authorization": f"Bearer {tokens['access_token']}"}

    return _headers

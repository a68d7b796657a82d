import pytest
import requests

from cliente import ClienteApi, EstadoSesion, ModoAccion, SesionTransformacion, eliminar_y_redirigir
from utils.errores import CreditoInsuficiente, ErrorComunicacion, NoAutorizado, NoEncontrado
from utils.seguridad import SeguridadUtils


@pytest.fixture
def api_de(client):
    def _api(id_usuario=None):
        token = None
        if id_usuario is not None:
            token = SeguridadUtils.crear_tokens_autenticacion("ana@fotos.com", id_usuario)["access_token"]
        return ClienteApi("http://testserver", token=token, http=client)

    return _api


def test_sesion_completa_sobre_http(api_de, crear_usuario, renderizador, saldo_de):
    id_usuario = crear_usuario(nombre="Ana", apellido="Lopez", saldo=3)
    api = api_de(id_usuario)
    navegaciones = []
    sesion = SesionTransformacion(
        ModoAccion.AGREGAR,
        "removeBackground",
        id_usuario,
        ledger=api,
        persistencia=api,
        renderizador=renderizador,
        navegar=navegaciones.append,
    )

    sesion.registrar_carga_exitosa({"publicId": "abc123", "width": 640, "height": 480})
    sesion.editar_titulo("Sin fondo")
    assert sesion.aplicar().exito
    assert sesion.saldo_creditos == 2
    assert saldo_de(id_usuario) == 2

    resultado = sesion.guardar()

    assert resultado.exito
    registro = resultado.valor
    assert sesion.estado == EstadoSesion.GUARDADA
    assert navegaciones == [f"/transformations/{registro['_id']}"]
    assert registro["config"] == {"removeBackground": {"enabled": True}}
    assert api.obtener(registro["_id"])["author"]["firstName"] == "Ana"

    eliminar_y_redirigir(api, registro["_id"], id_usuario, navegaciones.append)

    assert navegaciones[-1] == "/"
    with pytest.raises(NoEncontrado):
        api.obtener(registro["_id"])


def test_errores_tipados(api_de, crear_usuario):
    id_usuario = crear_usuario(saldo=0)
    api = api_de(id_usuario)

    with pytest.raises(CreditoInsuficiente):
        api.ajustar(id_usuario, -1)
    with pytest.raises(NoEncontrado):
        api.obtener(999)
    with pytest.raises(NoAutorizado):
        api_de().obtener_saldo()


def test_solo_debitos(api_de, crear_usuario):
    id_usuario = crear_usuario()

    with pytest.raises(ValueError):
        api_de(id_usuario).ajustar(id_usuario, 5)


class _HttpCaido:
    def request(self, *args, **kwargs):
        raise requests.ConnectionError("conexión rechazada")


def test_fallo_de_conexion():
    api = ClienteApi("http://localhost:1", token="x", http=_HttpCaido())

    with pytest.raises(ErrorComunicacion) as excinfo:
        api.obtener_saldo()

    assert excinfo.value.codigo == "ConnectionFailed"


def test_desde_config():
    from config import ClienteConfig

    api = ClienteApi.desde_config("tok", ClienteConfig(base_url="http://api.local/", timeout_segundos=5.0))

    assert api.base_url == "http://api.local"
    assert api.timeout == 5.0
    assert api.token == "tok"


def test_eliminar_y_redirigir_con_bd_caida(tmp_path, caplog):
    from database import Database
    from services.imagenes import ServicioImagenes

    caida = Database(f"sqlite:///{tmp_path / 'no_existe' / 'x.db'}")
    navegaciones = []

    with caplog.at_level("ERROR", logger="ClienteApi"):
        eliminar_y_redirigir(ServicioImagenes(caida), 1, 1, navegaciones.append)

    assert navegaciones == ["/"]
    assert "Error inesperado eliminando la imagen 1" in caplog.text
    caida.dispose()

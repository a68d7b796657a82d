import pytest

from utils.errores import ErrorValidacion, NoAutorizado, NoEncontrado, PropietarioNoEncontrado


def _payload(**extra):
    payload = {
        "title": "Mi foto",
        "transformationType": "fill",
        "publicId": "abc123",
        "secureUrl": "https://res.cloudinary.com/demo/image/upload/abc123",
        "width": 1000,
        "height": 1000,
        "config": {"fill": {"aspectRatio": "1:1", "width": 1000, "height": 1000}},
        "transformationUrl": "https://res.cloudinary.com/demo/image/upload/e_gen_fill/abc123",
        "aspectRatio": "1:1",
    }
    payload.update(extra)
    return payload


class TestCrear:

    def test_crea_con_el_autor_y_su_proyeccion(self, servicio_imagenes, crear_usuario, rutas_revalidadas):
        id_autor = crear_usuario(nombre="Ana", apellido="Lopez")

        registro = servicio_imagenes.crear(_payload(), id_autor)

        assert registro["_id"] is not None
        assert registro["title"] == "Mi foto"
        assert registro["config"] == {"fill": {"aspectRatio": "1:1", "width": 1000, "height": 1000}}
        assert registro["author"] == {"_id": id_autor, "firstName": "Ana", "lastName": "Lopez"}
        assert registro["createdAt"] is not None
        assert rutas_revalidadas == ["/"]

    def test_propietario_inexistente(self, servicio_imagenes):
        with pytest.raises(PropietarioNoEncontrado):
            servicio_imagenes.crear(_payload(), 4242)

    def test_ignora_author_del_payload(self, servicio_imagenes, crear_usuario):
        id_autor = crear_usuario()
        otro = crear_usuario(nombre="Beto")

        registro = servicio_imagenes.crear(_payload(author={"_id": otro}), id_autor)

        assert registro["author"]["_id"] == id_autor

    def test_rechaza_configuracion_invalida(self, servicio_imagenes, crear_usuario):
        id_autor = crear_usuario()

        with pytest.raises(ErrorValidacion):
            servicio_imagenes.crear(_payload(config={"blur": {"radio": 3}}), id_autor)


class TestActualizar:

    def test_el_autor_actualiza(self, servicio_imagenes, crear_usuario, rutas_revalidadas):
        id_autor = crear_usuario()
        registro = servicio_imagenes.crear(_payload(), id_autor)

        actualizado = servicio_imagenes.actualizar(
            {**_payload(title="Otro título"), "_id": registro["_id"]}, id_autor
        )

        assert actualizado["_id"] == registro["_id"]
        assert actualizado["title"] == "Otro título"
        assert actualizado["publicId"] == "abc123"
        assert rutas_revalidadas[-1] == f"/transformations/{registro['_id']}"

    def test_otro_usuario_no_autorizado_y_registro_intacto(self, servicio_imagenes, crear_usuario):
        autor = crear_usuario(nombre="Ana")
        intruso = crear_usuario(nombre="Beto")
        registro = servicio_imagenes.crear(_payload(), autor)

        with pytest.raises(NoAutorizado):
            servicio_imagenes.actualizar({**_payload(title="Hackeada"), "_id": registro["_id"]}, intruso)

        guardado = servicio_imagenes.obtener(registro["_id"])
        assert guardado["title"] == "Mi foto"
        assert guardado["author"]["_id"] == autor

    def test_imagen_inexistente(self, servicio_imagenes, crear_usuario):
        id_autor = crear_usuario()

        with pytest.raises(NoEncontrado):
            servicio_imagenes.actualizar({**_payload(), "_id": 999}, id_autor)

        with pytest.raises(NoEncontrado):
            servicio_imagenes.actualizar(_payload(), id_autor)


class TestObtenerEliminar:

    def test_obtener_no_expone_credenciales_ni_saldo(self, servicio_imagenes, crear_usuario):
        id_autor = crear_usuario()
        registro = servicio_imagenes.crear(_payload(), id_autor)

        obtenido = servicio_imagenes.obtener(registro["_id"])

        assert set(obtenido["author"]) == {"_id", "firstName", "lastName"}

    def test_obtener_inexistente(self, servicio_imagenes):
        with pytest.raises(NoEncontrado):
            servicio_imagenes.obtener(12345)

    def test_eliminar(self, servicio_imagenes, crear_usuario, rutas_revalidadas):
        id_autor = crear_usuario()
        registro = servicio_imagenes.crear(_payload(), id_autor)

        servicio_imagenes.eliminar(registro["_id"], id_autor)

        with pytest.raises(NoEncontrado):
            servicio_imagenes.obtener(registro["_id"])
        assert f"/transformations/{registro['_id']}" in rutas_revalidadas

    def test_eliminar_ajena_o_inexistente(self, servicio_imagenes, crear_usuario):
        autor = crear_usuario()
        intruso = crear_usuario(nombre="Beto")
        registro = servicio_imagenes.crear(_payload(), autor)

        with pytest.raises(NoAutorizado):
            servicio_imagenes.eliminar(registro["_id"], intruso)
        with pytest.raises(NoEncontrado):
            servicio_imagenes.eliminar(777, autor)

        assert servicio_imagenes.obtener(registro["_id"])["_id"] == registro["_id"]

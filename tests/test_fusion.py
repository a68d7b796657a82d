from utils.fusion import fusionar_configuracion


def test_borrador_nulo_devuelve_copia_de_la_confirmada():
    confirmada = {"fill": {"aspectRatio": "1:1"}, "restore": {"enabled": True}}

    resultado = fusionar_configuracion(None, confirmada)

    assert resultado == confirmada
    assert resultado is not confirmada
    assert resultado["fill"] is not confirmada["fill"]


def test_confirmada_nula_se_trata_como_vacia():
    borrador = {"recolor": {"prompt": "car", "to": "red"}}

    assert fusionar_configuracion(borrador, None) == fusionar_configuracion(borrador, {})
    assert fusionar_configuracion(borrador, None) == borrador


def test_conserva_claves_hermanas_a_cualquier_profundidad():
    confirmada = {
        "recolor": {"prompt": "car", "to": "red", "opciones": {"multiple": True, "nivel": 2}},
        "restore": {"enabled": True},
    }
    borrador = {"recolor": {"to": "blue", "opciones": {"nivel": 3}}}

    resultado = fusionar_configuracion(borrador, confirmada)

    assert resultado == {
        "recolor": {"prompt": "car", "to": "blue", "opciones": {"multiple": True, "nivel": 3}},
        "restore": {"enabled": True},
    }


def test_colision_escalar_reemplaza_sin_combinar():
    assert fusionar_configuracion({"fill": "none"}, {"fill": {"width": 10}}) == {"fill": "none"}
    assert fusionar_configuracion({"fill": {"width": 10}}, {"fill": "none"}) == {"fill": {"width": 10}}
    assert fusionar_configuracion({"fill": {"width": 20}}, {"fill": {"width": 10}}) == {"fill": {"width": 20}}


def test_no_modifica_las_entradas():
    confirmada = {"remove": {"prompt": "dog", "multiple": True}}
    borrador = {"remove": {"prompt": "cat"}}

    resultado = fusionar_configuracion(borrador, confirmada)
    resultado["remove"]["multiple"] = False

    assert confirmada == {"remove": {"prompt": "dog", "multiple": True}}
    assert borrador == {"remove": {"prompt": "cat"}}


def test_aplicar_relacion_de_aspecto_sobre_configuracion_vacia():
    borrador = {"fill": {"aspectRatio": "1:1", "width": 1000, "height": 1000}}

    assert fusionar_configuracion(borrador, {}) == {
        "fill": {"aspectRatio": "1:1", "width": 1000, "height": 1000}
    }

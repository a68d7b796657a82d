import threading

import pytest

from utils.errores import CreditoInsuficiente, NoEncontrado


def test_ajustar_debita_y_retorna_nuevo_saldo(servicio_creditos, crear_usuario, saldo_de):
    id_usuario = crear_usuario(saldo=5)

    assert servicio_creditos.ajustar(id_usuario, -1) == 4
    assert saldo_de(id_usuario) == 4


def test_ajustar_acredita_con_delta_positivo(servicio_creditos, crear_usuario):
    id_usuario = crear_usuario(saldo=0)

    assert servicio_creditos.ajustar(id_usuario, 3) == 3
    assert servicio_creditos.obtener_saldo(id_usuario) == 3


def test_saldo_insuficiente_no_modifica_el_saldo(servicio_creditos, crear_usuario, saldo_de):
    id_usuario = crear_usuario(saldo=1)

    with pytest.raises(CreditoInsuficiente):
        servicio_creditos.ajustar(id_usuario, -2)

    assert saldo_de(id_usuario) == 1


def test_usuario_inexistente(servicio_creditos):
    with pytest.raises(NoEncontrado):
        servicio_creditos.ajustar(9999, -1)

    with pytest.raises(NoEncontrado):
        servicio_creditos.obtener_saldo(9999)


def test_debitos_concurrentes_nunca_dejan_saldo_negativo(servicio_creditos, crear_usuario, saldo_de):
    id_usuario = crear_usuario(saldo=1)
    barrera = threading.Barrier(2)
    exitos, rechazos, otros = [], [], []

    def debitar():
        barrera.wait()
        try:
            exitos.append(servicio_creditos.ajustar(id_usuario, -1))
        except CreditoInsuficiente as e:
            rechazos.append(e)
        except Exception as e:
            otros.append(e)

    hilos = [threading.Thread(target=debitar) for _ in range(2)]
    for hilo in hilos:
        hilo.start()
    for hilo in hilos:
        hilo.join(10)

    assert otros == []
    assert exitos == [0]
    assert len(rechazos) == 1
    assert saldo_de(id_usuario) == 0

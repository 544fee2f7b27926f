"""Request payload builders shared by the tests."""


def entry_payload(**overrides):
    payload = {
        "nombre": "Hassan Alejandro",
        "apellidos": "Rodriguez Perez",
        "ci": "99032608049",
        "tipoVehiculo": ["Carro"],
        "chapa": "P123456",
        "fechaEntrada": "2026-10-17T08:30:00",
        "lugarDestino": {"Entidades": ["Área 1"]},
    }
    payload.update(overrides)
    return payload

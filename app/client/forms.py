# app/client/forms.py
"""
Entry form state helpers for the web client.

The form is a plain dict in the wire shape of POST /entries
(nombre, apellidos, ci, tipoVehiculo, chapa, fechaEntrada, lugarDestino, fechaSalida).
"""

VEHICLE_TYPES = ["Carro", "Moto", "Camión", "Camioneta", "Bus", "N/A"]

LOCATIONS = {
    "Entidades": [
        "Acubamos SURL",
        "Supergigantes",
        "Agencia de Paquetería",
        "Etecsa",
        "Azumat OC",
        "Azumat UEB SG",
    ],
}

REQUIRED_TEXT_FIELDS = {
    "nombre": "First name is required.",
    "apellidos": "Surname is required.",
    "ci": "National ID is required.",
    "chapa": "Plate is required.",
    "fechaEntrada": "Entry time is required.",
}


def empty_form() -> dict:
    return {
        "nombre": "",
        "apellidos": "",
        "ci": "",
        "tipoVehiculo": [],
        "chapa": "",
        "fechaEntrada": "",
        "lugarDestino": {},
        "fechaSalida": "",
    }


def toggle_vehicle_type(types: list[str], vehicle_type: str, checked: bool) -> list[str]:
    if checked:
        return types if vehicle_type in types else [*types, vehicle_type]
    return [t for t in types if t != vehicle_type]


def toggle_destination(destinations: dict[str, list[str]], location: str,
                       sublocation: str, checked: bool) -> dict[str, list[str]]:
    """Check/uncheck a sub-location; a location with nothing checked is dropped."""
    updated = {loc: list(subs) for loc, subs in destinations.items()}
    if checked:
        subs = updated.setdefault(location, [])
        if sublocation not in subs:
            subs.append(sublocation)
    elif location in updated:
        updated[location] = [s for s in updated[location] if s != sublocation]
        if not updated[location]:
            del updated[location]
    return updated


def validate_entry_form(form: dict) -> list[str]:
    """Return the validation messages for a form; an empty list means it can be submitted."""
    errors = [
        message
        for field, message in REQUIRED_TEXT_FIELDS.items()
        if not str(form.get(field) or "").strip()
    ]
    if not form.get("tipoVehiculo"):
        errors.append("At least one vehicle type must be selected.")
    if not any(subs for subs in (form.get("lugarDestino") or {}).values()):
        errors.append("At least one destination must be selected.")
    return errors

# app/client/qr.py
"""
Parses the text payload of a national ID card QR code.

Expected format (no separators between fields other than the tags):
    N:HASSAN ALEJANDRO A:RODRIGUEZ PEREZ CI:99032608049
    N:HASSAN ALEJANDROA:RODRIGUEZ PEREZCI:99032608049
"""

import re
from dataclasses import dataclass
from typing import Optional

QR_PATTERN = re.compile(
    r"^\s*N:(?P<first_name>.+?)\s*A:(?P<last_name>.+?)\s*CI:\s*(?P<national_id>\d+)\s*$",
    re.DOTALL,
)


@dataclass
class QRData:
    first_name: str
    last_name: str
    national_id: str

    def as_form_fields(self) -> dict:
        return {"nombre": self.first_name, "apellidos": self.last_name, "ci": self.national_id}


def _fallback_split(text: str) -> Optional[QRData]:
    parts = text.split(":")
    if len(parts) < 4:
        return None
    first_name = parts[1].strip()
    if first_name.endswith("A"):
        first_name = first_name[:-1]
    last_name = parts[2].strip()
    if last_name.endswith("CI"):
        last_name = last_name[:-2]
    national_id = parts[3].strip()
    if not (first_name.strip() and last_name.strip() and national_id):
        return None
    return QRData(first_name.strip(), last_name.strip(), national_id)


def parse_qr_data(text: Optional[str]) -> Optional[QRData]:
    """Return the visitor's names and ID, or None when the payload is not an ID card QR."""
    if not text:
        return None
    match = QR_PATTERN.match(text)
    if match:
        return QRData(
            first_name=match.group("first_name").strip(),
            last_name=match.group("last_name").strip(),
            national_id=match.group("national_id"),
        )
    return _fallback_split(text)

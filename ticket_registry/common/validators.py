# funciones de validacion para parametros de seguridad, direcciones e importes
import re
from decimal import Decimal, InvalidOperation
from .constants import ADDRESS_BYTES, WEI_PER_ETHER

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{%d}$" % (ADDRESS_BYTES * 2))

# funcion para verificar que la longitud de bits cumple el minimo requerido
def ensure_min_bits(bits: int, min_bits: int, name: str):
    if bits < min_bits:
        raise ValueError(f"{name}: longitud mínima {min_bits} bits.")

def is_valid_address(address) -> bool:
    return isinstance(address, str) and bool(_ADDRESS_RE.match(address))

# funcion para verificar que una direccion tiene el formato 0x + 40 digitos hex
def ensure_valid_address(address, name: str = "dirección"):
    if not is_valid_address(address):
        raise ValueError(f"{name} no válida: {address!r}")

# los importes son enteros en wei, nunca negativos (bool se rechaza aunque sea int)
def ensure_non_negative_amount(amount, name: str = "importe"):
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"{name} debe ser un entero en wei")
    if amount < 0:
        raise ValueError(f"{name} no puede ser negativo")

# convierte una cantidad en ether (int, str o Decimal) a wei sin perder precision
def ether_to_wei(amount) -> int:
    if isinstance(amount, float):
        raise ValueError("Usa str o Decimal para importes en ether, no float")
    try:
        value = Decimal(amount) * WEI_PER_ETHER
    except (InvalidOperation, TypeError):
        raise ValueError(f"Importe en ether no válido: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Importe en ether no finito: {amount!r}")
    if value < 0:
        raise ValueError("El importe en ether no puede ser negativo")
    if value != value.to_integral_value():
        raise ValueError("El importe tiene fracciones de wei")
    return int(value)

# valida y normaliza a minusculas para poder comparar direcciones
def normalize_address(address, name: str = "dirección") -> str:
    ensure_valid_address(address, name)
    return address.lower()

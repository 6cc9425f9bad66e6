# sello HMAC-SHA256 del estado persistido de un registro
from os import urandom
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, hmac
from ..logger import logger
from ..config import HMAC_KEY_MIN_BITS
from ..common.constants import ALGO_HMAC_SHA256
from ..common.serialization import canonical_json
from ..common.validators import ensure_min_bits

# clave nueva para sellar el estado
def generate_hmac_key(bits: int = 256) -> bytes:
    ensure_min_bits(bits, HMAC_KEY_MIN_BITS, "HMAC key")
    return urandom(bits // 8)

def _mac(key: bytes, state: dict):
    h = hmac.HMAC(key, hashes.SHA256())
    h.update(canonical_json(state))
    return h

# sello en hexadecimal sobre el JSON canonico del estado
def seal_state(key: bytes, state: dict) -> str:
    tag = _mac(key, state).finalize()
    logger.debug(f"SEAL: estado sellado con {ALGO_HMAC_SHA256}")
    return tag.hex()

# True solo si el sello corresponde al estado con esta clave
def verify_seal(key: bytes, state: dict, tag_hex: str) -> bool:
    try:
        tag = bytes.fromhex(tag_hex)
    except (TypeError, ValueError):
        logger.warning("SEAL: sello con formato no válido")
        return False
    try:
        _mac(key, state).verify(tag)
    except InvalidSignature:
        logger.warning(f"SEAL: el sello {ALGO_HMAC_SHA256} no coincide con el estado")
        return False
    return True

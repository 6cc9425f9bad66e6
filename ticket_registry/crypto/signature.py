# firma de payloads de transacciones con RSA-PSS-SHA256
#
# El payload (dict) se serializa en JSON canonico antes de firmar, de modo que
# el orden de las claves o la forma Unicode no cambian la firma. La firma viaja
# en base64 dentro del envoltorio de la transaccion.

import base64
import binascii

from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives import hashes
from cryptography.exceptions import InvalidSignature
from ..logger import logger
from ..common.constants import ALGO_RSA_PSS_SHA256
from ..common.serialization import canonical_json
from .asymmetric import deserialize_public_key


def _pss():
    return padding.PSS(mgf=padding.MGF1(hashes.SHA256()), salt_length=padding.PSS.MAX_LENGTH)


# devuelve la firma en base64 del payload canonico
def sign_payload(private_key, payload: dict) -> str:
    try:
        signature = private_key.sign(canonical_json(payload), _pss(), hashes.SHA256())
    except Exception as e:
        logger.error(f"SIGN: Error al firmar el payload '{payload.get('method')}': {e}")
        raise
    logger.debug(f"SIGN: Payload '{payload.get('method')}' firmado con {ALGO_RSA_PSS_SHA256}")
    return base64.b64encode(signature).decode("ascii")


# False si la firma no corresponde al payload o no es base64 valido
def verify_payload(public_key_pem: str, payload: dict, signature_b64: str) -> bool:
    try:
        signature = base64.b64decode(signature_b64, validate=True)
    except (TypeError, binascii.Error):
        logger.warning("SIGN: Firma con codificación base64 no válida")
        return False
    public_key = deserialize_public_key(public_key_pem)
    try:
        public_key.verify(signature, canonical_json(payload), _pss(), hashes.SHA256())
    except InvalidSignature:
        logger.info(f"SIGN: Firma inválida para '{payload.get('method')}' ({ALGO_RSA_PSS_SHA256})")
        return False
    return True

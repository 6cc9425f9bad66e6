# construccion, firma y verificacion de transacciones enviadas a la cadena

from ..crypto.signature import sign_payload, verify_payload
from ..crypto.address import address_from_public_key
from ..common.constants import ALGO_RSA_PSS_SHA256
from ..common.validators import normalize_address, ensure_non_negative_amount
from ..logger import logger


def build_transaction(sender: str, to: str, method: str, args: list | None = None, value: int = 0, nonce: int = 0) -> dict:
    ensure_non_negative_amount(value, "valor")
    ensure_non_negative_amount(nonce, "nonce")
    return {
        "from": normalize_address(sender, "remitente"),
        "to": normalize_address(to, "contrato"),
        "method": method,
        "args": list(args or []),
        "value": value,
        "nonce": nonce,
    }


# firma el payload con la clave privada del remitente; el kid es su direccion
def sign_transaction(private_key, payload: dict) -> dict:
    return {
        "payload": payload,
        "signature": sign_payload(private_key, payload),
        "meta": {
            "alg": ALGO_RSA_PSS_SHA256,
            "kid": address_from_public_key(private_key.public_key()),
        },
    }


def verify_transaction(wrapper: dict, public_key_pem: str) -> bool:
    try:
        payload = wrapper["payload"]
        signature = wrapper["signature"]
        meta = wrapper["meta"]
    except (KeyError, TypeError) as e:
        logger.warning(f"TX: Transacción mal formada: {e}")
        return False
    if not isinstance(payload, dict) or not isinstance(meta, dict):
        logger.warning("TX: Transacción mal formada: payload y meta deben ser objetos")
        return False
    if meta.get("alg") != ALGO_RSA_PSS_SHA256:
        logger.warning("TX: Algoritmo de firma no soportado")
        return False
    # el kid declarado tiene que ser el remitente del payload
    kid = meta.get("kid")
    if not isinstance(kid, str) or not isinstance(payload.get("from"), str) or kid.lower() != payload["from"].lower():
        logger.warning(f"TX: El kid {kid!r} no coincide con el remitente {payload.get('from')!r}")
        return False
    return verify_payload(public_key_pem, payload, signature)

# derivacion de direcciones de cuenta y de contrato
from cryptography.hazmat.primitives import hashes, serialization
from ..common.constants import ADDRESS_BYTES
from .asymmetric import deserialize_public_key


def _digest(data: bytes) -> bytes:
    h = hashes.Hash(hashes.SHA256())
    h.update(data)
    return h.finalize()


# la direccion son los ultimos 20 bytes del SHA-256 del SubjectPublicKeyInfo en DER
def address_from_public_key(public_key) -> str:
    spki = public_key.public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return "0x" + _digest(spki)[-ADDRESS_BYTES:].hex()


def address_from_pem(pem: str) -> str:
    return address_from_public_key(deserialize_public_key(pem))


# direccion determinista de un contrato: depende del desplegador y de su nonce
def derive_contract_address(deployer: str, nonce: int) -> str:
    seed = f"{deployer.lower()}|{nonce}".encode("utf-8")
    return "0x" + _digest(seed)[-ADDRESS_BYTES:].hex()

import re
import pytest

from ticket_registry.crypto.asymmetric import (
    generate_key_pair,
    serialize_public_key,
    deserialize_public_key,
    serialize_private_key,
    deserialize_private_key,
)
from ticket_registry.crypto.address import address_from_public_key, address_from_pem, derive_contract_address
from ticket_registry.crypto.signature import sign_payload, verify_payload
from ticket_registry.crypto.mac import generate_hmac_key, seal_state, verify_seal


@pytest.fixture(scope="module")
def key_pair():
    return generate_key_pair()


# la direccion tiene formato 0x + 40 hex y es estable
def test_address_format_and_determinism(key_pair):
    priv, pub = key_pair
    address = address_from_public_key(pub)
    assert re.fullmatch(r"0x[0-9a-f]{40}", address)
    assert address == address_from_public_key(priv.public_key())
    assert address == address_from_pem(serialize_public_key(pub))


def test_different_keys_give_different_addresses(key_pair):
    _, other_pub = generate_key_pair()
    assert address_from_public_key(key_pair[1]) != address_from_public_key(other_pub)


# la direccion del contrato cambia con el nonce y no distingue mayusculas del desplegador
def test_contract_address_depends_on_nonce():
    deployer = "0x" + "ab" * 20
    a0 = derive_contract_address(deployer, 0)
    a1 = derive_contract_address(deployer, 1)
    assert a0 != a1
    assert a0 == derive_contract_address(deployer.upper().replace("0X", "0x"), 0)
    assert re.fullmatch(r"0x[0-9a-f]{40}", a0)


# clave RSA por debajo del minimo configurado
def test_generate_key_pair_too_short_raises():
    with pytest.raises(ValueError):
        generate_key_pair(1024)


def test_pem_roundtrip_with_password(key_pair):
    priv, pub = key_pair
    pem = serialize_private_key(priv, password=b"clave-secreta")
    restored = deserialize_private_key(pem, password=b"clave-secreta")
    assert serialize_public_key(restored.public_key()) == serialize_public_key(pub)
    assert serialize_public_key(deserialize_public_key(serialize_public_key(pub))) == serialize_public_key(pub)


# firma y verificacion RSA-PSS de un payload
def test_sign_and_verify_payload(key_pair):
    priv, pub = key_pair
    pem = serialize_public_key(pub)
    payload = {"method": "mint", "args": [0, 10**18], "nonce": 0}
    sig = sign_payload(priv, payload)
    assert verify_payload(pem, payload, sig) is True
    assert verify_payload(pem, dict(payload, nonce=1), sig) is False


# la firma cubre el JSON canonico: el orden de las claves no importa
def test_signature_independent_of_key_order(key_pair):
    priv, pub = key_pair
    sig = sign_payload(priv, {"a": 1, "method": "mint"})
    assert verify_payload(serialize_public_key(pub), {"method": "mint", "a": 1}, sig) is True


def test_verify_payload_with_other_key_or_bad_encoding(key_pair):
    priv, _ = key_pair
    _, other_pub = generate_key_pair()
    payload = {"method": "withdraw_balance"}
    sig = sign_payload(priv, payload)
    assert verify_payload(serialize_public_key(other_pub), payload, sig) is False
    assert verify_payload(serialize_public_key(key_pair[1]), payload, "no-es-base64!") is False
    assert verify_payload(serialize_public_key(key_pair[1]), payload, None) is False


# sello HMAC del estado persistido
def test_seal_and_verify_state():
    key = generate_hmac_key(256)
    assert len(key) * 8 == 256
    state = {"registry": {"total_sold": 1}, "ledger": {}}
    tag = seal_state(key, state)
    assert len(bytes.fromhex(tag)) == 32
    assert verify_seal(key, {"ledger": {}, "registry": {"total_sold": 1}}, tag) is True
    assert verify_seal(key, {"registry": {"total_sold": 2}, "ledger": {}}, tag) is False
    assert verify_seal(generate_hmac_key(256), state, tag) is False


@pytest.mark.parametrize("tag", ["zz", None, ""])
def test_verify_seal_with_malformed_tag(tag):
    assert verify_seal(generate_hmac_key(256), {"a": 1}, tag) is False


def test_hmac_key_too_short_raises():
    with pytest.raises(ValueError):
        generate_hmac_key(64)

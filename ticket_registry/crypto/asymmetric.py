from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from ..config import RSA_MIN_BITS
from ..common.validators import ensure_min_bits

# funcion para generar el par de claves RSA de una cuenta
def generate_key_pair(key_size: int = 2048):
    ensure_min_bits(key_size, RSA_MIN_BITS, "RSA key")
    private_key = rsa.generate_private_key(
        public_exponent=65537,
        key_size=key_size,
        backend=default_backend()
    )
    public_key = private_key.public_key()
    return private_key, public_key


# FUNCIONES PARA SERIALIZAR Y DESERIALIZAR CLAVES A FORMATO PEM, Y PODER REGISTRARLAS EN LA CADENA
def serialize_public_key(public_key) -> str:
    pem = public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo
    )
    return pem.decode('utf-8')

def deserialize_public_key(pem_data: str):
    return serialization.load_pem_public_key(
        pem_data.encode('utf-8'),
        backend=default_backend()
    )

def serialize_private_key(private_key, password: bytes = None) -> str:
    encryption_algorithm = (
        serialization.BestAvailableEncryption(password)
        if password
        else serialization.NoEncryption()
    )

    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=encryption_algorithm
    )
    return pem.decode('utf-8')

def deserialize_private_key(pem_data: str, password: bytes = None):
    return serialization.load_pem_private_key(
        pem_data.encode('utf-8'),
        password=password,
        backend=default_backend()
    )

# configuracion global para el registro de entradas
import os, binascii
from pathlib import Path
from .common.validators import ether_to_wei

# rutas y parametros del archivo de log
LOG_FILE = os.getenv("LOG_FILE", "ticket_registry.log")

# parametros de seguridad
HMAC_KEY_MIN_BITS = 128 # HMAC-SHA256
RSA_MIN_BITS = 2048     # RSA-2048

# rutas para almacenar datos y llaves
DATA_PATH = os.getenv("DATA_PATH", "data")
STATE_FILE = os.getenv("STATE_FILE", "registry_state.json")

# limites del evento (los precios van en wei: 1 ether = 10**18 wei)
MAX_TICKETS = int(os.getenv("MAX_TICKETS", "1000"))
# el precio base se puede dar en ether (BASE_TICKET_PRICE_ETHER, tiene prioridad) o en wei
BASE_TICKET_PRICE_ETHER = os.getenv("BASE_TICKET_PRICE_ETHER", "")
BASE_TICKET_PRICE = (
    ether_to_wei(BASE_TICKET_PRICE_ETHER)
    if BASE_TICKET_PRICE_ETHER
    else int(os.getenv("BASE_TICKET_PRICE_WEI", str(10**18)))
)

# nombre y simbolo del token no fungible que representa cada entrada
TOKEN_NAME = os.getenv("TOKEN_NAME", "EventTicket")
TOKEN_SYMBOL = os.getenv("TOKEN_SYMBOL", "TCKT")

# clave HMAC para sellar el estado persistido (si esta vacia se genera un fichero)
STATE_MAC_KEY_HEX = os.getenv("STATE_MAC_KEY_HEX", "")

def load_or_create_state_key() -> bytes:
    keyfile = Path(DATA_PATH) / "state_mac.key"
    if STATE_MAC_KEY_HEX:
        return binascii.unhexlify(STATE_MAC_KEY_HEX.strip())
    if keyfile.exists():
        return binascii.unhexlify(keyfile.read_text().strip())
    from .crypto.mac import generate_hmac_key
    k = generate_hmac_key(256)
    keyfile.parent.mkdir(parents=True, exist_ok=True)
    keyfile.write_text(binascii.hexlify(k).decode("ascii"))
    return k

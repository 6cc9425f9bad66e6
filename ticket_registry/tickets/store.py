"""
MODULO PARA PERSISTIR EL ESTADO DE UN REGISTRO DESPLEGADO

El estado (registro, tokens y saldos) se guarda como JSON en la carpeta de
datos, sellado con un HMAC-SHA256 para detectar manipulaciones.
"""
import json
from pathlib import Path

from ..config import DATA_PATH, STATE_FILE, load_or_create_state_key
from ..logger import logger
from ..crypto.mac import seal_state, verify_seal
from ..ledger.balances import Ledger
from ..nft.tokens import TokenRegistry
from .registry import TicketRegistry

STATE_PATH = Path(DATA_PATH) / STATE_FILE


def _state_of(registry: TicketRegistry) -> dict:
    return {
        "registry": registry.to_dict(),
        "tokens": registry.tokens.to_dict(),
        "ledger": registry.ledger.to_dict(),
    }


# funcion para guardar el estado sellado en disco
# se escribe en un temporal junto al destino y despues se renombra sobre el
def save_registry(registry: TicketRegistry, path: str | Path | None = None) -> Path:
    path = Path(path) if path else STATE_PATH
    state = _state_of(registry)
    tag = seal_state(load_or_create_state_key(), state)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(json.dumps({"state": state, "mac": tag}, indent=2, ensure_ascii=False), encoding="utf-8")
        tmp.replace(path)
    except OSError as e:
        logger.error(f"STORE: No se pudo guardar el estado en {path}: {e}")
        tmp.unlink(missing_ok=True)
        raise
    logger.info(f"STORE: Estado del registro {registry.address} guardado en {path}")
    return path


# funcion para cargar el estado; None si no hay fichero o si esta corrupto
def load_registry(path: str | Path | None = None) -> TicketRegistry | None:
    path = Path(path) if path else STATE_PATH
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except ValueError as e:
        logger.warning(f"STORE: Estado corrupto ({e}). Se aparta el fichero.")
        backup = path.with_suffix(".corrupt")
        path.replace(backup)
        logger.info(f"Se ha renombrado el archivo corrupto a {backup.name}")
        return None

    try:
        state = raw["state"]
        tag = raw["mac"]
    except (KeyError, TypeError) as e:
        logger.error(f"STORE: Estado sin sello válido: {e}")
        raise ValueError("El estado persistido no tiene un sello válido")
    if not isinstance(state, dict) or not verify_seal(load_or_create_state_key(), state, tag):
        logger.error(f"STORE: El sello del estado en {path} no verifica")
        raise ValueError("El estado persistido ha sido manipulado")

    ledger = Ledger.from_dict(state["ledger"])
    tokens = TokenRegistry.from_dict(state["tokens"])
    registry = TicketRegistry.from_dict(state["registry"], ledger=ledger, tokens=tokens)
    logger.info(f"STORE: Estado del registro {registry.address} cargado desde {path}")
    return registry

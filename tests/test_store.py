import json
import pytest

from conftest import ETHER, OWNER, BUYER
from ticket_registry import config
from ticket_registry.ledger.context import CallContext
from ticket_registry.tickets import store
from ticket_registry.tickets.errors import AlreadySoldError
from ticket_registry.tickets.registry import TicketRegistry


# carpeta de datos temporal para no ensuciar el repo
@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "DATA_PATH", str(tmp_path))
    monkeypatch.setattr(config, "STATE_MAC_KEY_HEX", "")
    return tmp_path


def _populated_registry() -> TicketRegistry:
    reg = TicketRegistry(OWNER, base_price=ETHER)
    owner = CallContext(OWNER)
    reg.update_event_details(owner, "Festival", "2026-07-01", "18:00", "Parque", "Tres días", "", "", "")
    reg.mint(owner, 10, ETHER)
    reg.mint(owner, 20, 2 * ETHER)
    reg.ledger.credit(BUYER, 2 * ETHER)
    reg.buy_ticket(CallContext(BUYER, 2 * ETHER), 20)
    return reg


# prueba de guardar y cargar el estado (roundtrip)
def test_save_and_load_roundtrip(data_dir):
    reg = _populated_registry()
    path = store.save_registry(reg, data_dir / "state.json")
    assert path.exists()

    loaded = store.load_registry(path)
    assert loaded.to_dict() == reg.to_dict()
    assert loaded.get_event_details() == reg.get_event_details()
    assert loaded.get_sold_tickets() == [1]
    assert loaded.tokens.owner_of(20) == BUYER
    assert loaded.tokens.transfer_log == reg.tokens.transfer_log
    assert loaded.balance() == 2 * ETHER

    # el registro cargado sigue funcionando
    with pytest.raises(AlreadySoldError):
        loaded.buy_ticket(CallContext(BUYER, 2 * ETHER), 20)
    loaded.ledger.credit(BUYER, ETHER)
    loaded.buy_ticket(CallContext(BUYER, ETHER), 10)
    assert loaded.total_sold == 2

    # la clave del sello se creo en la carpeta de datos
    assert (data_dir / "state_mac.key").exists()


def test_load_missing_file_returns_none(data_dir):
    assert store.load_registry(data_dir / "no_existe.json") is None


# fichero corrupto --> se aparta como .corrupt y se devuelve None
def test_load_corrupt_file_is_backed_up(data_dir):
    path = data_dir / "state.json"
    path.write_text("{no es json", encoding="utf-8")
    assert store.load_registry(path) is None
    assert not path.exists()
    assert (data_dir / "state.corrupt").exists()


# modificar el estado guardado invalida el sello
def test_tampered_state_raises(data_dir):
    path = store.save_registry(_populated_registry(), data_dir / "state.json")
    raw = json.loads(path.read_text(encoding="utf-8"))
    raw["state"]["registry"]["tickets"][0]["price"] = 1
    path.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ValueError):
        store.load_registry(path)


def test_missing_mac_raises(data_dir):
    path = store.save_registry(_populated_registry(), data_dir / "state.json")
    raw = json.loads(path.read_text(encoding="utf-8"))
    del raw["mac"]
    path.write_text(json.dumps(raw), encoding="utf-8")
    with pytest.raises(ValueError):
        store.load_registry(path)


# con otra clave el sello no verifica
def test_state_sealed_with_other_key_raises(data_dir, monkeypatch):
    path = store.save_registry(_populated_registry(), data_dir / "state.json")
    monkeypatch.setattr(config, "STATE_MAC_KEY_HEX", "00" * 32)
    with pytest.raises(ValueError):
        store.load_registry(path)


# la clave configurada por entorno tiene prioridad sobre el fichero
def test_env_key_is_used_when_set(data_dir, monkeypatch):
    monkeypatch.setattr(config, "STATE_MAC_KEY_HEX", "11" * 32)
    assert config.load_or_create_state_key() == bytes.fromhex("11" * 32)
    assert not (data_dir / "state_mac.key").exists()


# guardar sobre un estado existente lo sustituye entero y no deja temporales
def test_save_replaces_existing_state_without_leftovers(data_dir):
    path = data_dir / "state.json"
    path.write_text("contenido anterior", encoding="utf-8")
    reg = _populated_registry()
    store.save_registry(reg, path)
    assert [p.name for p in data_dir.iterdir() if p.suffix == ".tmp"] == []
    assert store.load_registry(path).to_dict() == reg.to_dict()

    reg.ledger.credit(BUYER, ETHER)
    reg.buy_ticket(CallContext(BUYER, ETHER), 10)
    store.save_registry(reg, path)
    assert not (data_dir / "state.json.tmp").exists()
    assert store.load_registry(path).get_sold_tickets() == [0, 1]


# si falla el renombrado el fichero anterior queda intacto
def test_failed_save_keeps_previous_state(data_dir, monkeypatch):
    path = store.save_registry(_populated_registry(), data_dir / "state.json")
    before = path.read_text(encoding="utf-8")

    def fail_replace(self, target):
        raise OSError("disco lleno")

    monkeypatch.setattr(store.Path, "replace", fail_replace)
    reg = TicketRegistry(OWNER, base_price=ETHER)
    with pytest.raises(OSError):
        store.save_registry(reg, path)
    assert path.read_text(encoding="utf-8") == before
    assert not (data_dir / "state.json.tmp").exists()

# tests/conftest.py
import sys
import os

import pytest

# Añade el directorio raíz del proyecto (el padre de 'tests/') al sys.path
# Esto permite que los tests importen 'ticket_registry' sin instalar el paquete.
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

ETHER = 10**18
OWNER = "0x" + "aa" * 20
BUYER = "0x" + "bb" * 20
OTHER = "0x" + "cc" * 20


@pytest.fixture
def registry():
    from ticket_registry.tickets.registry import TicketRegistry
    return TicketRegistry(OWNER, base_price=ETHER)

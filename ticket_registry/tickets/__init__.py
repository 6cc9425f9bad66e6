"""registro de entradas

Este paquete expone la API del registro de entradas: el registro en si
(`ticket_registry.tickets.registry`), sus modelos, la taxonomia de errores y la
persistencia del estado, para poder importarlos como `from ticket_registry.tickets import ...`.
"""
from .errors import *
from .models import Ticket, EventDetails, TicketPurchased
from .registry import TicketRegistry, only_owner, atomic
from .store import save_registry, load_registry

from dataclasses import dataclass
from ..common.validators import normalize_address, ensure_non_negative_amount


# contexto de una llamada: quien llama y cuanto valor (wei) adjunta
@dataclass(frozen=True)
class CallContext:
    sender: str
    value: int = 0

    def __post_init__(self):
        # la direccion se guarda normalizada para comparar con el propietario
        object.__setattr__(self, "sender", normalize_address(self.sender, "remitente"))
        ensure_non_negative_amount(self.value, "valor adjunto")

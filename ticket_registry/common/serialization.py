# serializacion JSON determinista para firmar y sellar datos
import json
import unicodedata


def canonical_json(obj) -> bytes:
    def _normalize(o):
        # normalizar cadenas Unicode a NFC para que la firma no dependa de la forma
        if isinstance(o, str):
            return unicodedata.normalize("NFC", o)
        if isinstance(o, dict):
            return {
                (unicodedata.normalize("NFC", k) if isinstance(k, str) else k): _normalize(v)
                for k, v in o.items()
            }
        if isinstance(o, (list, tuple)):
            return [_normalize(i) for i in o]
        return o

    # keys ordenadas, sin espacios innecesarios
    return json.dumps(_normalize(obj), separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")

"""
Serializa las escrituras que mueven lotes.
Streamlit atiende cada sesión del navegador en su propio hilo; sin este candado
dos ventas del mismo producto podrían leer el mismo lote FEFO a la vez.
"""
import threading
from functools import wraps

_write_lock = threading.RLock()


def serialized_write(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        with _write_lock:
            return func(*args, **kwargs)

    return wrapper

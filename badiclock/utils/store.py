from __future__ import annotations
from typing import Any, Dict, Optional
import json, os, sqlite3, threading, time

# Keys shared with browser clients (localStorage uses the same names).
LOCATION_KEY = "badi-calendar-location"
LANGUAGE_KEY = "badi-calendar-language"


class MemoryStore:
    """Process-local key-value store; values are JSON round-tripped like SQLiteStore."""
    def __init__(self):
        self.data: Dict[str, str] = {}
        self.lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self.lock:
            raw = self.data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any):
        s = json.dumps(value, separators=(',', ':'))
        with self.lock:
            self.data[key] = s

    def delete(self, key: str):
        with self.lock:
            self.data.pop(key, None)


class SQLiteStore:
    def __init__(self, path: str):
        self.path = path
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        self.conn = sqlite3.connect(self.path, check_same_thread=False)
        self.lock = threading.Lock()
        self._init()

    def _init(self):
        with self.lock:
            self.conn.execute("""CREATE TABLE IF NOT EXISTS prefs (
                k TEXT PRIMARY KEY,
                v TEXT NOT NULL,
                updated_at REAL NOT NULL
            )""")
            self.conn.commit()

    def get(self, key: str) -> Optional[Any]:
        with self.lock:
            row = self.conn.execute("SELECT v FROM prefs WHERE k=?", (key,)).fetchone()
        if not row:
            return None
        try:
            return json.loads(row[0])
        except ValueError:
            return None

    def set(self, key: str, value: Any):
        s = json.dumps(value, separators=(',', ':'))
        with self.lock:
            self.conn.execute("REPLACE INTO prefs (k,v,updated_at) VALUES (?,?,?)", (key, s, time.time()))
            self.conn.commit()

    def delete(self, key: str):
        with self.lock:
            self.conn.execute("DELETE FROM prefs WHERE k=?", (key,))
            self.conn.commit()

    def close(self):
        with self.lock:
            self.conn.close()


def open_store(cfg: Any) -> Any:
    """Build a store from the ``store`` config section ({backend, path})."""
    section = (cfg or {}).get("store") or {}
    backend = str(section.get("backend", "memory")).strip().lower()
    if backend == "sqlite":
        return SQLiteStore(str(section.get("path") or "var/badiclock.sqlite3"))
    if backend != "memory":
        raise ValueError(f"unknown store backend {backend!r}")
    return MemoryStore()

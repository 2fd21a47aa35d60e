# utils/sessions.py
from models.corpus import OLD_TESTAMENT, NEW_TESTAMENT

TESTAMENTS = (OLD_TESTAMENT, NEW_TESTAMENT)
DEFAULT_TESTAMENT = OLD_TESTAMENT


class SessionStore:
    """Per-user navigation state. Last write wins."""

    def get(self, key, default=None):
        raise NotImplementedError

    def set(self, key, value):
        raise NotImplementedError

    def delete(self, key):
        raise NotImplementedError


class InMemorySessionStore(SessionStore):
    def __init__(self):
        self._data = {}

    def get(self, key, default=None):
        return self._data.get(key, default)

    def set(self, key, value):
        self._data[key] = value

    def delete(self, key):
        self._data.pop(key, None)


def get_testament(store: SessionStore, user_id):
    return store.get(str(user_id), DEFAULT_TESTAMENT)


def set_testament(store: SessionStore, user_id, testament):
    if testament not in TESTAMENTS:
        raise ValueError(f"Unknown testament: {testament}")
    store.set(str(user_id), testament)

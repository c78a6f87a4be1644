import logging
import threading
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

logger = logging.getLogger(__name__)

db = SQLAlchemy()
migrate = Migrate()


class EditorRegistry:
    """Open variant editors, one per product, held in process memory."""

    def __init__(self):
        self._editors = {}
        self._lock = threading.Lock()

    def get(self, product_id):
        with self._lock:
            return self._editors.get(product_id)

    def put(self, product_id, editor):
        with self._lock:
            self._editors[product_id] = editor
        return editor

    def pop(self, product_id):
        with self._lock:
            return self._editors.pop(product_id, None)

    def clear(self):
        with self._lock:
            self._editors.clear()

    def __len__(self):
        with self._lock:
            return len(self._editors)


editors = EditorRegistry()


def init_editors(app):
    editors.clear()
    logger.debug("Editor registry ready for %s", app.name)

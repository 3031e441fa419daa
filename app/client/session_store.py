"""
Persists the identity provider session between CLI runs as a small JSON file.
"""

import json
import os
from typing import Optional
from app.utils.logger import get_logger

logger = get_logger(__name__)


class SessionStore:
    def __init__(self, path: str):
        self.path = os.path.expanduser(path)

    def load(self) -> Optional[dict]:
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"[SESSION] Ignoring unreadable session file {self.path}: {e}")
            return None

    def save(self, data: dict):
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f)

    def clear(self):
        if os.path.exists(self.path):
            os.remove(self.path)

import json
import logging
from pathlib import Path
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)


class TokenStore:
    """Keeps the bearer token between CLI invocations in a small JSON file"""

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path or settings.CLIENT_TOKEN_FILE).expanduser()

    def get_token(self) -> Optional[str]:
        if not self.path.is_file():
            return None
        try:
            with open(self.path) as f:
                return json.load(f).get("token")
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def set_token(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"token": token}, f)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

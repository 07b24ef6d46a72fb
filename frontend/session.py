import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def default_session_path() -> Path:
    override = (os.getenv("FLOWPARTNER_SESSION_FILE") or "").strip()
    if override:
        return Path(override)
    return Path.home() / ".flowpartner" / "session.json"


class SessionStore:
    """Token + user persisted as JSON between runs."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else default_session_path()
        self.token: str | None = None
        self.user: dict | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.user)

    @property
    def role(self) -> str | None:
        return (self.user or {}).get("role")

    def load(self) -> "SessionStore":
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", self.path, e)
            return self

        token, user = data.get("token"), data.get("user")
        if token and isinstance(user, dict):
            self.token, self.user = token, user
        return self

    def save(self, token: str, user: dict) -> None:
        self.token, self.user = token, user
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token, "user": user}, indent=2), encoding="utf-8")
        try:
            os.chmod(self.path, 0o600)
        except OSError:
            pass

    def clear(self) -> None:
        self.token, self.user = None, None
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

import os, logging
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

log = logging.getLogger(__name__)

ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
DEFAULT_PORT = 3000
DEFAULT_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    model_name: str = DEFAULT_MODEL
    api_key: str | None = None

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """Read PORT / MODEL_NAME / GEMINI_API_KEY once; values are frozen afterwards."""
        if load_env_file:
            load_dotenv(dotenv_path=ENV_PATH)

        raw_port = os.getenv("PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            log.warning("Invalid PORT %r, using %d", raw_port, DEFAULT_PORT)
            port = DEFAULT_PORT

        return cls(
            port=port,
            model_name=os.getenv("MODEL_NAME") or DEFAULT_MODEL,
            api_key=os.getenv("GEMINI_API_KEY") or None,
        )

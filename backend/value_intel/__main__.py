import logging, os
import uvicorn
from .config import Settings
from .main import create_app


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    settings = Settings.from_env()
    log = logging.getLogger("value_intel")
    log.info("Suki Value Intelligence listening on http://localhost:%d", settings.port)
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

"""Process configuration loaded from config.json."""
import base64
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from folders import create_folder_structure

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_CONFIG_PATH = Path("config.json")


class Config(BaseModel):
    """Server settings. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    host: str = "127.0.0.1"
    port: int = 8080
    image_folder: str = "./images"
    pwd: str = "secret"

    @property
    def root(self) -> Path:
        return Path(self.image_folder)

    @property
    def token(self) -> str:
        """Bearer token expected on uploads: base64 of the password."""
        return base64.b64encode(self.pwd.encode("utf-8")).decode("ascii")


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> Config:
    """Read config from path, writing a default config (and image folders) if absent."""
    path = Path(path)
    if path.exists():
        return Config.model_validate_json(path.read_text(encoding="utf-8"))

    config = Config()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2), encoding="utf-8")
    create_folder_structure(config.root)
    logger.info("Default config created: %s", path)
    return config

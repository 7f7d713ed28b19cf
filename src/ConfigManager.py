import yaml
import os
import sys
from pathlib import Path
from src.logging_utils import get_logger
from utils.filename_utils import AUDIO_EXTENSIONS

logger = get_logger(__name__)


class ConfigManager:
    """Handles loading and validating the converter configuration."""

    def __init__(self, config_path=None):
        # Resolve config path: explicit > env > default
        self.path = config_path or os.getenv("APP_CONFIG_PATH") or "config.yml"
        self.data = self._load()
        self._setup_properties()

    def _load(self):
        # The converter runs with no arguments, so a missing file means defaults
        if not os.path.exists(self.path):
            logger.info(f"Config file '{self.path}' not found, using defaults")
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                logger.info(f"Loading config from: {self.path}")
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse config file: {e}")
            sys.exit(1)

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error(f"Config file '{self.path}' must contain a mapping")
            sys.exit(1)
        return data

    def _setup_properties(self):
        work_dir = str(self.data.get("work_dir") or ".")
        if work_dir.startswith("~"):
            work_dir = os.path.expanduser(work_dir)
        self.work_dir = Path(work_dir)

        self.encoding = str(self.data.get("encoding") or "utf-8")
        self.audio_extensions = self._normalize_extensions(
            self.data.get("audio_extensions")
        )

        self.embed_lyrics = bool(self.data.get("embed_lyrics", False))
        self.show_progress = bool(self.data.get("show_progress", True))

    def _normalize_extensions(self, raw) -> tuple[str, ...]:
        """
        Lower-case each extension and make sure it starts with a dot.
        Falls back to the built-in list when nothing usable is configured.
        """
        if not raw:
            return AUDIO_EXTENSIONS
        if isinstance(raw, str):
            raw = [raw]

        extensions = []
        for ext in raw:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            extensions.append(ext)

        if not extensions:
            logger.warning("audio_extensions is empty, using defaults")
            return AUDIO_EXTENSIONS
        return tuple(extensions)

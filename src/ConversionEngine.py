from pathlib import Path
from typing import Optional

from src.ConfigManager import ConfigManager
from src.logging_utils import get_logger
from utils.filename_utils import split_audio_name
from utils.vtt_to_lrc import ConversionError, vtt_to_lrc

logger = get_logger(__name__)


class DirectoryOpenError(ConversionError):
    def __init__(self, path):
        super().__init__(path, "Cannot open directory")


class ConversionEngine:
    """
    Converts individual VTT files and reports per-file failures without
    stopping the batch.
    """

    def __init__(self, config: ConfigManager, embedder=None):
        self.config = config
        self.embedder = embedder
        if self.config.embed_lyrics and self.embedder is None:
            from utils.LyricsEmbedder import LyricsEmbedder

            self.embedder = LyricsEmbedder()

    @staticmethod
    def is_vtt_file(name: str) -> bool:
        """True when the text after the last dot is `vtt` in any case."""
        dot = name.rfind(".")
        return dot != -1 and name[dot:].lower() == ".vtt"

    def find_vtt_files(self) -> list[Path]:
        """List `.vtt` entries of the work directory, sorted by name."""
        try:
            names = sorted(p.name for p in self.config.work_dir.iterdir())
        except OSError as e:
            raise DirectoryOpenError(self.config.work_dir) from e
        return [self.config.work_dir / n for n in names if self.is_vtt_file(n)]

    def output_path(self, vtt_path: Path) -> Path:
        base, _ = split_audio_name(vtt_path.name, self.config.audio_extensions)
        return vtt_path.parent / f"{base}.lrc"

    def convert_file(self, vtt_path: Path) -> Optional[Path]:
        """
        Convert one VTT file into `<base>.lrc` next to it.
        Returns the LRC path, or None if the file could not be converted.
        """
        lrc_path = self.output_path(vtt_path)
        logger.info(f"Converting: {vtt_path.name} -> {lrc_path.name}")

        try:
            tags = vtt_to_lrc(vtt_path, lrc_path, encoding=self.config.encoding)
        except ConversionError as e:
            logger.error(f"{e} ({e.__cause__})")
            return None
        except (OSError, LookupError) as e:
            logger.error(f"Failed to convert {vtt_path.name}: {e}")
            return None
        except UnicodeError as e:
            logger.error(
                f"Encoding error in {vtt_path.name} ({self.config.encoding}): {e}"
            )
            # Drop the partially written output
            lrc_path.unlink(missing_ok=True)
            return None

        logger.debug(f"Wrote {tags} cue(s) to {lrc_path.name}")

        if self.config.embed_lyrics:
            self._embed(vtt_path, lrc_path)

        return lrc_path

    def _embed(self, vtt_path: Path, lrc_path: Path):
        _, audio_name = split_audio_name(vtt_path.name, self.config.audio_extensions)
        if not audio_name:
            logger.debug(f"No audio extension in {vtt_path.name}, nothing to embed")
            return

        audio_path = vtt_path.parent / audio_name
        if not audio_path.exists():
            logger.warning(f"Audio file not found for embedding: {audio_name}")
            return

        # The LRC was just regenerated, so replace any lyrics already embedded
        embedded = self.embedder.embed_lrc_to_file(
            audio_path,
            lrc_path,
            skip_if_exists=False,
            encoding=self.config.encoding,
        )
        if not embedded:
            logger.warning(f"Lyrics not embedded into {audio_name}")

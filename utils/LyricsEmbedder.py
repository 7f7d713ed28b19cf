from pathlib import Path
from mutagen.flac import FLAC
from mutagen.mp4 import MP4
from mutagen.id3 import ID3, USLT, ID3NoHeaderError
from src.logging_utils import get_logger

logger = get_logger(__name__)

SUPPORTED_SUFFIXES = (".flac", ".m4a", ".mp4", ".mp3")


class LyricsEmbedder:
    """
    Embeds converted LRC text into the audio file a subtitle was made for,
    so players that ignore sidecar files still show synced lyrics.

    Usage:
        embedder = LyricsEmbedder()
        embedder.embed_lrc_to_file(Path("song.mp3"), Path("song.lrc"))
    """

    def has_embedded_lyrics(self, audio_path: Path) -> bool:
        """
        Check if an audio file already has embedded lyrics.

        Args:
            audio_path: Path to the audio file

        Returns:
            True if lyrics are already embedded, False otherwise
        """
        suffix = audio_path.suffix.lower()
        try:
            if suffix == ".flac":
                audio = FLAC(str(audio_path))
                return "LYRICS" in audio or "UNSYNCEDLYRICS" in audio

            elif suffix in [".m4a", ".mp4"]:
                audio = MP4(str(audio_path))
                return "\xa9lyr" in audio.tags if audio.tags else False

            elif suffix == ".mp3":
                try:
                    audio = ID3(str(audio_path))
                except ID3NoHeaderError:
                    return False
                return any(key.startswith("USLT") for key in audio.keys())

        except Exception as e:
            logger.warning(f"Error checking embedded lyrics for {audio_path.name}: {e}")

        return False

    def embed_lrc_to_file(
        self,
        audio_path: Path,
        lrc_path: Path,
        skip_if_exists: bool = True,
        encoding: str = "utf-8",
    ) -> bool:
        """
        Embed LRC file content into a single audio file.

        Args:
            audio_path: Path to the audio file
            lrc_path: Path to the LRC file produced for it
            skip_if_exists: If True, skip files that already have embedded lyrics
            encoding: Text encoding the LRC file was written in

        Returns:
            True if lyrics were successfully embedded, False otherwise
        """
        suffix = audio_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            logger.warning(f"Unsupported audio format: {audio_path.suffix}")
            return False

        if not lrc_path.exists():
            logger.debug(f"No LRC file found for: {audio_path.name}")
            return False

        if skip_if_exists and self.has_embedded_lyrics(audio_path):
            logger.info(f"Lyrics already embedded, skipping: {audio_path.name}")
            return False

        try:
            with open(lrc_path, "r", encoding=encoding, errors="replace") as f:
                lrc_content = f.read()

            if suffix == ".flac":
                audio = FLAC(str(audio_path))
                audio["LYRICS"] = lrc_content
                audio.save()

            elif suffix in [".m4a", ".mp4"]:
                audio = MP4(str(audio_path))
                if audio.tags is None:
                    audio.add_tags()
                audio.tags["\xa9lyr"] = lrc_content
                audio.save()

            else:
                try:
                    audio = ID3(str(audio_path))
                except ID3NoHeaderError:
                    audio = ID3()

                # USLT frame, language 'eng', empty description
                audio.add(USLT(encoding=3, lang="eng", desc="", text=lrc_content))
                audio.save(str(audio_path), v2_version=3)

            logger.info(f"Embedded lyrics into {audio_path.name}")
            return True

        except Exception as e:
            logger.error(f"Failed to embed lyrics for {audio_path.name}: {e}")
            return False

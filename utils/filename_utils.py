from typing import Iterable, Optional, Tuple

AUDIO_EXTENSIONS = (".wav", ".mp3", ".flac", ".ogg", ".m4a", ".aac", ".wma")


def _find_vtt_marker(name: str) -> int:
    # Only the exact lower- and upper-case spellings are recognised
    pos = name.find(".vtt")
    if pos == -1:
        pos = name.find(".VTT")
    return pos


def split_audio_name(
    name: str, audio_extensions: Iterable[str] = AUDIO_EXTENSIONS
) -> Tuple[str, Optional[str]]:
    """
    Split a subtitle filename into its output base name and the audio
    filename embedded before the `.vtt` suffix, if any.

        split_audio_name("song.mp3.vtt")  -> ("song", "song.mp3")
        split_audio_name("song.vtt")      -> ("song", None)
        split_audio_name("notes.txt")     -> ("notes.txt", None)
    """
    marker = _find_vtt_marker(name)
    if marker == -1:
        return name, None

    prev_dot = name.rfind(".", 0, marker)
    if prev_dot != -1:
        known = {ext.lower() for ext in audio_extensions}
        if name[prev_dot:marker].lower() in known:
            return name[:prev_dot], name[:marker]

    return name[:marker], None


def normalize_name(
    name: str, audio_extensions: Iterable[str] = AUDIO_EXTENSIONS
) -> str:
    """Return the base name used for the `.lrc` file produced from `name`."""
    base, _ = split_audio_name(name, audio_extensions)
    return base

"""Accepted audio file types.

Drag/drop and file selection accept MP3, WAV and M4A only. The upload
endpoint additionally accepts what the recorder itself produces.
"""

from pathlib import PurePath

from src.core.exceptions import UnsupportedAudioTypeError

# MIME type -> extensions, in the shape browser drop zones expect
DROP_ACCEPT: dict[str, list[str]] = {
    "audio/mpeg3": [".mp3"],
    "audio/wav": [".wav"],
    "audio/mp4": [".m4a"],
}

# Aliases browsers and OSes report for the same containers
_MIME_ALIASES: dict[str, str] = {
    "audio/mpeg": "audio/mpeg3",
    "audio/mp3": "audio/mpeg3",
    "audio/x-wav": "audio/wav",
    "audio/wave": "audio/wav",
    "audio/vnd.wave": "audio/wav",
    "audio/x-m4a": "audio/mp4",
    "audio/m4a": "audio/mp4",
}

RECORDER_ACCEPT: dict[str, list[str]] = {
    "audio/webm": [".webm"],
    "audio/wav": [".wav"],
}

# ffmpeg demuxer names for extensions that differ
_FFMPEG_FORMATS = {"m4a": "mp4"}


def normalize_mime(content_type: str | None) -> str | None:
    """Lower-case, strip parameters and collapse known aliases."""
    if not content_type:
        return None
    base = content_type.split(";", 1)[0].strip().lower()
    return _MIME_ALIASES.get(base, base)


def extension_of(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def mime_for_extension(ext: str) -> str | None:
    """Canonical MIME type for an accepted extension (drop or recorder)."""
    for accept in (DROP_ACCEPT, RECORDER_ACCEPT):
        for mime, extensions in accept.items():
            if ext in extensions:
                return mime
    return None


def is_drop_accepted(filename: str) -> bool:
    """True if the file may be dropped or selected for transcription."""
    ext = extension_of(filename)
    return any(ext in extensions for extensions in DROP_ACCEPT.values())


def validate_upload(filename: str, content_type: str | None) -> str:
    """Check an upload against the accepted types and return its canonical MIME.

    The extension decides; a declared content type, when present, must agree
    with it.

    Raises:
        UnsupportedAudioTypeError: If the extension or content type is not accepted.
    """
    ext = extension_of(filename)
    accepted = {**RECORDER_ACCEPT, **DROP_ACCEPT}
    mime = next((m for m, exts in accepted.items() if ext in exts), None)
    if mime is None:
        raise UnsupportedAudioTypeError(filename, content_type)

    declared = normalize_mime(content_type)
    if declared and declared != "application/octet-stream" and declared != mime:
        raise UnsupportedAudioTypeError(filename, content_type)
    return mime


def ffmpeg_format(filename: str) -> str | None:
    """ffmpeg format name for a filename, or None to let ffmpeg probe."""
    ext = extension_of(filename).lstrip(".")
    if not ext:
        return None
    return _FFMPEG_FORMATS.get(ext, ext)

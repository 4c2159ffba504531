from pathlib import Path
from typing import Optional

from cookit.loguru import warning_suppress

from .consts import MAX_NAME_BYTES, UNSAFE_NAME_CHARS_REGEX


def format_error(e: BaseException):
    return f"{type(e).__name__}: {e}"


def sanitize_name(name: str, fallback: str = "_") -> str:
    """
    make an untrusted name usable as a single path component,
    result is at most `MAX_NAME_BYTES` bytes in UTF-8
    """
    cleaned = UNSAFE_NAME_CHARS_REGEX.sub("_", name)
    cleaned = cleaned.encode("u8")[:MAX_NAME_BYTES].decode("u8", "ignore")
    return cleaned.strip(" .") or fallback


def discard_file(path: Path) -> Optional[Path]:
    """remove a file left behind by a failed step, returns path if removed"""
    if not path.is_file():
        return None
    with warning_suppress(f"Failed to remove `{path}`"):
        path.unlink()
        return path
    return None

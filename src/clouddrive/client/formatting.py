"""Human-readable sizes and file-kind icons for the terminal views."""
import mimetypes
from decimal import ROUND_HALF_UP, Decimal

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")
TWO_PLACES = Decimal("0.01")


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count with binary (1024) units, at most two decimals.

    Halves round up: 1152 bytes (1.125 KB) is "1.13 KB".

    >>> format_file_size(0)
    '0 Bytes'
    >>> format_file_size(1536)
    '1.5 KB'
    >>> format_file_size(1048576)
    '1 MB'
    """
    if size_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while size_bytes >= 1024 ** (exponent + 1) and exponent < len(SIZE_UNITS) - 1:
        exponent += 1
    value = (Decimal(size_bytes) / Decimal(1024 ** exponent)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[exponent]}"


def guess_content_type(file_name: str) -> str:
    content_type, _ = mimetypes.guess_type(file_name)
    return content_type or ""


def file_icon(type_or_name: str) -> str:
    """Icon for a MIME type, or for a file name when no type is known."""
    kind = type_or_name.lower()
    if "/" not in kind:
        kind = guess_content_type(kind)
    if kind.startswith("image/"):
        return "🖼"
    if kind.startswith("video/"):
        return "🎞"
    if kind.startswith("audio/"):
        return "🎵"
    if "pdf" in kind:
        return "📕"
    if "word" in kind:
        return "📝"
    if "excel" in kind or "spreadsheet" in kind:
        return "📊"
    if "zip" in kind or "rar" in kind:
        return "🗜"
    if "text" in kind:
        return "📄"
    return "📁"

"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

Works out what kind of content a response body holds.

MIME = Multipurpose Internet Mail Extensions

The Content-Type header tells the client how to interpret the body:

    Content-Type: image/png          → decode and display as image
    Content-Type: application/json   → parse as JSON
    Content-Type: text/plain         → show as text

Get it wrong and browsers download HTML instead of rendering it, or show
a PNG as garbage characters.

=============================================================================
TWO SOURCES OF EVIDENCE
=============================================================================

1. THE FILENAME
   "logo.png" → image/png. Cheap, but only available for files and only
   as trustworthy as whoever named the file.

2. THE BYTES THEMSELVES ("sniffing")
   Most binary formats start with a fixed signature ("magic number"):

       ┌────────────────────────────┬──────────────────┐
       │ First bytes                │ Type             │
       ├────────────────────────────┼──────────────────┤
       │ 89 50 4E 47 0D 0A 1A 0A    │ image/png        │
       │ FF D8 FF                   │ image/jpeg       │
       │ 25 50 44 46 2D  ("%PDF-")  │ application/pdf  │
       │ 50 4B 03 04     ("PK..")   │ application/zip  │
       │ 1F 8B                      │ application/gzip │
       └────────────────────────────┴──────────────────┘

   Markup is recognised by its opening tag. Anything else is classified
   as text or binary by looking for control characters near the start.

mime_type_for_filename_and_data() prefers the filename when the extension
is known and falls back to the bytes otherwise.

=============================================================================
"""

from pathlib import Path
from typing import Optional, Union


# =============================================================================
# WELL-KNOWN CONTENT TYPES
# =============================================================================

CONTENT_TYPE_X_EMPTY = b"application/x-empty"
CONTENT_TYPE_JSON = b"application/json"
CONTENT_TYPE_TEXT_HTML = b"text/html"

# Fallbacks used by the sniffer
DEFAULT_MIME_TYPE = "application/octet-stream"
ZERO_SIZE_MIME_TYPE = "application/x-zerosize"
TEXT_MIME_TYPE = "text/plain"

# How many leading bytes the text/binary heuristic examines
DEFAULT_SNIFF_LENGTH = 32


# =============================================================================
# EXTENSION DATABASE
# =============================================================================
#
# Maps file extensions (lowercase, with dot) to MIME types.
#
# =============================================================================

MIME_TYPES = {
    # Text
    ".html": "text/html",
    ".htm": "text/html",
    ".css": "text/css",
    ".js": "text/javascript",
    ".mjs": "text/javascript",
    ".json": "application/json",
    ".xml": "application/xml",
    ".txt": "text/plain",
    ".md": "text/markdown",
    ".csv": "text/csv",

    # Images
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/vnd.microsoft.icon",
    ".webp": "image/webp",
    ".avif": "image/avif",
    ".bmp": "image/bmp",

    # Fonts
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".ttf": "font/ttf",
    ".otf": "font/otf",

    # Audio / video
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".flac": "audio/flac",
    ".mp4": "video/mp4",
    ".webm": "video/webm",

    # Documents and archives
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".tar": "application/x-tar",
    ".gz": "application/gzip",
    ".rar": "application/vnd.rar",
    ".7z": "application/x-7z-compressed",

    # Other
    ".wasm": "application/wasm",
    ".map": "application/json",
    ".py": "text/x-python",
    ".sh": "text/x-shellscript",
    ".yaml": "text/yaml",
    ".yml": "text/yaml",
    ".toml": "text/x-toml",
}


# =============================================================================
# CONTENT SIGNATURES
# =============================================================================
#
# (offset, signature, MIME type). Checked in order; first match wins.
# Longer, more specific signatures come before shorter ones.
#
# =============================================================================

MAGIC_SIGNATURES = [
    (0, b"\x89PNG\r\n\x1a\n", "image/png"),
    (0, b"\xff\xd8\xff", "image/jpeg"),
    (0, b"GIF87a", "image/gif"),
    (0, b"GIF89a", "image/gif"),
    (0, b"%PDF-", "application/pdf"),
    (0, b"PK\x03\x04", "application/zip"),
    (0, b"\x1f\x8b", "application/gzip"),
    (0, b"7z\xbc\xaf\x27\x1c", "application/x-7z-compressed"),
    (0, b"Rar!\x1a\x07", "application/vnd.rar"),
    (0, b"\x00asm", "application/wasm"),
    (0, b"wOFF", "font/woff"),
    (0, b"wOF2", "font/woff2"),
    (0, b"OggS", "audio/ogg"),
    (0, b"fLaC", "audio/flac"),
    (0, b"ID3", "audio/mpeg"),
    (0, b"\x00\x00\x01\x00", "image/vnd.microsoft.icon"),
    (4, b"ftyp", "video/mp4"),
    (8, b"WEBP", "image/webp"),
]

# Opening markup, compared case-insensitively after BOM and whitespace
MARKUP_SIGNATURES = [
    (b"<!doctype html", "text/html"),
    (b"<html", "text/html"),
    (b"<head", "text/html"),
    (b"<body", "text/html"),
    (b"<svg", "image/svg+xml"),
    (b"<?xml", "application/xml"),
]

_BOMS = (b"\xef\xbb\xbf", b"\xff\xfe", b"\xfe\xff")

# Control bytes that may legitimately appear in text
_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\x1b")


# =============================================================================
# PUBLIC FUNCTIONS
# =============================================================================

def get_mime_type(path: Union[str, Path], default: Optional[str] = None) -> str:
    """
    Get the MIME type for a file based on its extension alone.

    Examples:
        >>> get_mime_type("style.css")
        'text/css'
        >>> get_mime_type("/path/to/IMAGE.PNG")
        'image/png'
        >>> get_mime_type("unknown.xyz")
        'application/octet-stream'
    """
    if isinstance(path, str):
        path = Path(path)

    extension = path.suffix.lower()
    return MIME_TYPES.get(extension, default or DEFAULT_MIME_TYPE)


def mime_type_for_data(data: bytes, sniff_length: int = DEFAULT_SNIFF_LENGTH) -> str:
    """
    Infer a MIME type from content bytes.

    Order of checks:
        1. empty             → application/x-zerosize
        2. magic signature   → the signature's type
        3. markup prefix     → text/html, image/svg+xml or application/xml
        4. looks like text   → text/plain
        5. otherwise         → application/octet-stream

    Args:
        data: Content to inspect. Only a prefix is ever read.
        sniff_length: Bytes examined by the text/binary heuristic.

    Returns:
        The MIME type name (no parameters).
    """
    if not data:
        return ZERO_SIZE_MIME_TYPE

    for offset, signature, mime_type in MAGIC_SIGNATURES:
        if data[offset:offset + len(signature)] == signature:
            return mime_type

    mime_type = _sniff_markup(data)
    if mime_type is not None:
        return mime_type

    if _looks_like_text(data[:sniff_length]):
        return TEXT_MIME_TYPE
    return DEFAULT_MIME_TYPE


def mime_type_for_filename_and_data(
    filename: Union[str, Path],
    data: bytes,
    sniff_length: int = DEFAULT_SNIFF_LENGTH,
) -> str:
    """
    Infer a MIME type from a filename, falling back to the content.

    A known extension decides on its own; content sniffing is only used
    when the extension is missing or not in MIME_TYPES.

    Examples:
        >>> mime_type_for_filename_and_data("index.html", b"")
        'text/html'
        >>> mime_type_for_filename_and_data("README", b"hello")
        'text/plain'
    """
    extension = Path(filename).suffix.lower()
    if extension in MIME_TYPES:
        return MIME_TYPES[extension]
    return mime_type_for_data(data, sniff_length)


# =============================================================================
# HELPERS
# =============================================================================

def _strip_bom(data: bytes) -> bytes:
    for bom in _BOMS:
        if data.startswith(bom):
            return data[len(bom):]
    return data


def _sniff_markup(data: bytes) -> Optional[str]:
    head = _strip_bom(data[:512]).lstrip().lower()
    for prefix, mime_type in MARKUP_SIGNATURES:
        if head.startswith(prefix):
            return mime_type
    return None


def _looks_like_text(sample: bytes) -> bool:
    """
    Text/binary heuristic.

    A byte-order mark means text. Otherwise the sample is text unless it
    holds a NUL or another control byte that text files do not use.
    Bytes >= 0x80 are allowed so UTF-8 passes.
    """
    if any(sample.startswith(bom) for bom in _BOMS):
        return True
    for byte in sample:
        if byte < 0x20 and byte not in _TEXT_CONTROL_BYTES:
            return False
        if byte == 0x7f:
            return False
    return True

# sniffle/receipt/sniff.py
"""Content-type sniffing for stored receipts.

Implements the fixed-prefix sniffing table from the WHATWG MIME Sniffing
standard: only the first ``SNIFF_LEN`` bytes are inspected, signatures are
matched in order, and anything unrecognised falls back to
``application/octet-stream``.
"""

SNIFF_LEN = 512
DEFAULT_TYPE = "application/octet-stream"
TEXT_TYPE = "text/plain; charset=utf-8"

_WHITESPACE = b"\t\n\x0c\r "

# Markup signatures; matched case-insensitively after leading whitespace and
# must be followed by a tag-terminating byte.
_HTML_TAGS = (
    b"<!DOCTYPE HTML", b"<HTML", b"<HEAD", b"<SCRIPT", b"<IFRAME", b"<H1",
    b"<DIV", b"<FONT", b"<TABLE", b"<A", b"<STYLE", b"<TITLE", b"<B",
    b"<BODY", b"<BR", b"<P", b"<!--",
)

# (mask, pattern, content type); pattern bytes are compared after masking.
_MASKED = (
    (b"\xff\xff\xff\xff\xff", b"%PDF-", "application/pdf"),
    (b"\xff" * 11, b"%!PS-Adobe-", "application/postscript"),
    # images
    (b"\xff\xff\xff\xff", b"\x00\x00\x01\x00", "image/x-icon"),
    (b"\xff\xff\xff\xff", b"\x00\x00\x02\x00", "image/x-icon"),
    (b"\xff\xff", b"BM", "image/bmp"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00WEBPVP", "image/webp"),
    # audio and video
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"FORM\x00\x00\x00\x00AIFF", "audio/aiff"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00WAVE", "audio/wave"),
    (b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff",
     b"RIFF\x00\x00\x00\x00AVI ", "video/avi"),
    # fonts
    (b"\x00" * 34 + b"\xff\xff", b"\x00" * 34 + b"LP", "application/vnd.ms-fontobject"),
)

_EXACT = (
    # byte order marks
    (b"\xfe\xff", "text/plain; charset=utf-16be"),
    (b"\xff\xfe", "text/plain; charset=utf-16le"),
    (b"\xef\xbb\xbf", TEXT_TYPE),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"\xff\xd8\xff", "image/jpeg"),
    (b".snd", "audio/basic"),
    (b"ID3", "audio/mpeg"),
    (b"OggS\x00", "application/ogg"),
    (b"MThd\x00\x00\x00\x06", "audio/midi"),
    (b"\x1aE\xdf\xa3", "video/webm"),
    # fonts
    (b"\x00\x01\x00\x00", "font/ttf"),
    (b"OTTO", "font/otf"),
    (b"ttcf", "font/collection"),
    (b"wOFF", "font/woff"),
    (b"wOF2", "font/woff2"),
    # archives
    (b"\x1f\x8b\x08", "application/x-gzip"),
    (b"PK\x03\x04", "application/zip"),
    (b"Rar!\x1a\x07\x00", "application/x-rar-compressed"),
    (b"Rar!\x1a\x07\x01\x00", "application/x-rar-compressed"),
    (b"\x00asm", "application/wasm"),
)


def _is_binary_byte(b: int) -> bool:
    return b <= 0x08 or b == 0x0B or 0x0E <= b <= 0x1A or 0x1C <= b <= 0x1F


def _match_masked(data: bytes, mask: bytes, pattern: bytes) -> bool:
    if len(data) < len(pattern):
        return False
    return all((d & m) == p for d, m, p in zip(data, mask, pattern))


def _match_markup(data: bytes) -> str | None:
    body = data.lstrip(_WHITESPACE)
    upper = body.upper()
    for tag in _HTML_TAGS:
        if upper.startswith(tag) and len(body) > len(tag) and body[len(tag)] in b" >":
            return "text/html; charset=utf-8"
    if body.startswith(b"<?xml"):
        return "text/xml; charset=utf-8"
    return None


def _is_mp4(data: bytes) -> bool:
    if len(data) < 12:
        return False
    box_size = int.from_bytes(data[:4], "big")
    if box_size % 4 != 0 or len(data) < box_size or data[4:8] != b"ftyp":
        return False
    for start in range(8, box_size, 4):
        if start == 12:
            continue  # minor version
        if data[start:start + 3] == b"mp4":
            return True
    return False


def detect_content_type(data: bytes) -> str:
    """Return the sniffed content type of ``data``.

    Only the first ``SNIFF_LEN`` bytes are considered. Empty input is treated
    as binary.
    """
    data = data[:SNIFF_LEN]
    if not data:
        return DEFAULT_TYPE

    markup = _match_markup(data)
    if markup:
        return markup

    for mask, pattern, ctype in _MASKED:
        if _match_masked(data, mask, pattern):
            return ctype

    for prefix, ctype in _EXACT:
        if data.startswith(prefix):
            return ctype

    if _is_mp4(data):
        return "video/mp4"

    if not any(_is_binary_byte(b) for b in data):
        return TEXT_TYPE
    return DEFAULT_TYPE

from typing import Optional

from rightshield.core.errors import InvalidInputError

def is_plain_text(filename: str, content_type: Optional[str]) -> bool:
    return content_type == "text/plain" or (filename or "").lower().endswith(".txt")

def placeholder_text(content_type: Optional[str], size: int) -> str:
    return (
        f"This {content_type or 'binary'} file requires advanced parsing. "
        f"File size: {size} bytes. Please ensure the document parsing service is properly configured."
    )

def extract_document_text(filename: str, content_type: Optional[str], file_bytes: bytes, max_bytes: int) -> str:
    """
    Main entry point for upload parsing.
    Plain text is decoded directly; anything else is returned as text only
    if it is valid UTF-8, otherwise a descriptive placeholder is returned.
    """
    if len(file_bytes) > max_bytes:
        raise InvalidInputError(f"File too large: {len(file_bytes)} bytes (limit {max_bytes})")

    if is_plain_text(filename, content_type):
        return file_bytes.decode("utf-8", errors="replace")

    try:
        return file_bytes.decode("utf-8")
    except UnicodeDecodeError:
        return placeholder_text(content_type, len(file_bytes))

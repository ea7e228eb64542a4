# insight_engine/helpers/chunker.py

from typing import List

DEFAULT_MAX_CHARS = 8000


def split_text_into_chunks(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> List[str]:
    """
    Split text into chunks of at most max_chars characters.

    Prefers to cut right after the last period in the window, then after the
    last newline, and only cuts mid-text when neither exists. Chunks are
    trimmed and empty ones are dropped.

    Args:
        text: The text to chunk
        max_chars: Maximum characters per chunk

    Returns:
        List of text chunks, in document order

    Raises:
        ValueError: If max_chars is less than 1
    """
    if max_chars < 1:
        raise ValueError(f"max_chars must be >= 1, got {max_chars}")

    chunks = []
    start = 0
    length = len(text)

    while start < length:
        end = start + max_chars
        if end >= length:
            chunks.append(text[start:].strip())
            break

        # Boundary must sit strictly after the cursor, otherwise try the next option
        split_at = text.rfind(".", start, end)
        if split_at <= start:
            split_at = text.rfind("\n", start, end)
        if split_at <= start:
            split_at = end - 1

        chunks.append(text[start : split_at + 1].strip())
        start = split_at + 1

    return [chunk for chunk in chunks if chunk]

"""PDF text extraction."""
import fitz  # PyMuPDF

from insight_engine.exceptions import ExtractionError


def extract_text_from_pdf(data: bytes) -> str:
    """
    Extract the raw text of a PDF held in memory.

    Pages are joined with a blank line.

    Raises:
        ExtractionError: If the buffer is empty or not a readable PDF
    """
    if not data:
        raise ExtractionError("Empty PDF buffer")

    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            pages = [page.get_text() for page in doc]
    except (RuntimeError, ValueError) as e:  # FileDataError subclasses RuntimeError
        raise ExtractionError(f"Could not read PDF: {e}") from e

    return "\n\n".join(pages)

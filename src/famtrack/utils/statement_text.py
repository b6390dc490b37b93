"""Loading statement files as plain text."""

from pathlib import Path

import pdfplumber
from pdfminer.psparser import PSException
from pdfplumber.utils.exceptions import PdfminerException

TEXT_SUFFIXES = {".txt", ".csv", ".ofx", ".qfx"}


def read_statement_text(path: str) -> str:
    """Return the text content of a statement file.

    PDFs go through pdfplumber page by page; everything else is read as text,
    trying UTF-8 first and Latin-1 for older bank exports.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file type is not supported or the PDF cannot be read
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Statement file not found: {path}")

    suffix = file_path.suffix.lower()
    if suffix == ".pdf":
        return _read_pdf(file_path)
    if suffix in TEXT_SUFFIXES:
        raw = file_path.read_bytes()
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError:
            return raw.decode("latin-1")
    raise ValueError(
        f"Unsupported statement file type '{suffix}'. "
        f"Expected .pdf or one of {', '.join(sorted(TEXT_SUFFIXES))}"
    )


def _read_pdf(file_path: Path) -> str:
    pages = []
    try:
        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                text = page.extract_text()
                if text:
                    pages.append(text)
    except (PdfminerException, PSException) as e:
        raise ValueError(f"Could not read PDF {file_path.name}: {e!r}") from e
    return "\n".join(pages)

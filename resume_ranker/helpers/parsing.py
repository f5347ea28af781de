import codecs
import os
from io import BytesIO
from typing import Tuple

from docx import Document
from pdfminer.high_level import extract_text as pdf_extract

from resume_ranker.utils.exceptions import UnsupportedFormatError

SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".pdf", ".docx", ".doc", ".txt")


def file_extension(file_name: str) -> str:
    return os.path.splitext(file_name or "")[1].lower()


def is_supported(file_name: str) -> bool:
    return file_extension(file_name) in SUPPORTED_EXTENSIONS


def read_txt(data: bytes) -> str:
    for bom, encoding in ((codecs.BOM_UTF8, "utf-8-sig"),
                          (codecs.BOM_UTF16_LE, "utf-16"),
                          (codecs.BOM_UTF16_BE, "utf-16")):
        if data.startswith(bom):
            return data.decode(encoding, errors="ignore")
    return data.decode("utf-8", errors="ignore")


def read_docx(data: bytes) -> str:
    doc = Document(BytesIO(data))
    lines = [p.text for p in doc.paragraphs]
    # tables hold a lot of resume content (skills grids, dates)
    for table in doc.tables:
        for row in table.rows:
            lines.append(" | ".join(cell.text for cell in row.cells))
    return "\n".join(lines)


def read_pdf(data: bytes) -> str:
    return pdf_extract(BytesIO(data))


def extract_text(file_bytes: bytes, file_name: str) -> str:
    """Extract plain text from an uploaded resume. Legacy .doc is read as text."""
    ext = file_extension(file_name)
    if ext == ".pdf":
        return read_pdf(file_bytes)
    if ext == ".docx":
        return read_docx(file_bytes)
    if ext in (".doc", ".txt"):
        return read_txt(file_bytes)
    raise UnsupportedFormatError(file_name, SUPPORTED_EXTENSIONS)

import io
import pdfplumber

def parse_pdf_text(source) -> str:
    """Text of every page; `source` is a path or the raw PDF bytes."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    text_parts = []
    with pdfplumber.open(source) as pdf:
        for page in pdf.pages:
            t = page.extract_text() or ""
            text_parts.append(t)
    return "\n".join(text_parts)

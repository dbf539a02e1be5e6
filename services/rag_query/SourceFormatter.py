"""Human-readable provenance for an answer's chunks."""

from shared.models.document import TEXT_SOURCE, Chunk, DocumentMeta, PdfMeta

TEXT_INPUT_LABEL = "Text Input"


def label_for(metadata: DocumentMeta) -> str:
    """Display label of one chunk's origin.

    document_type wins over source; PDF pages get a page reference and API
    text input is shown as "Text Input".
    """
    label = metadata.document_type or metadata.source or "unknown"
    match metadata:
        case PdfMeta(page_number=int() as page) if page > 0 and label.lower().endswith(".pdf"):
            return f"{label} (Page {page})"
        case _ if label == TEXT_SOURCE:
            return TEXT_INPUT_LABEL
        case _:
            return label


def collect_labels(chunks: list[Chunk]) -> list[str]:
    """Unique labels in order of first occurrence."""
    return list(dict.fromkeys(label_for(chunk.metadata) for chunk in chunks))


def format_sources(chunks: list[Chunk]) -> str:
    """Render labels as a markdown bullet list; "" when there are no chunks."""
    return "\n".join(f"- {label}" for label in collect_labels(chunks))

from __future__ import annotations

import fitz


def make_contract_pdf_bytes() -> bytes:
    doc = fitz.open()
    page = doc.new_page(width=595, height=842)
    paragraphs = [
        "This Agreement is entered into by and between Portal Labs and Example Corp.",
        "The parties agree to the terms and conditions outlined herein, including scope of work and fees.",
        "Payment is due within thirty (30) days of invoice receipt unless otherwise agreed.",
    ]
    y = 72
    for paragraph in paragraphs:
        page.insert_text((72, y), paragraph, fontsize=12)
        y += 28
    doc_bytes = doc.tobytes()
    doc.close()
    return doc_bytes


def make_report_pdf_bytes(pages: int = 2) -> bytes:
    doc = fitz.open()
    for index in range(pages):
        page = doc.new_page(width=595, height=842)
        page.insert_text((72, 72), f"Quarterly Report - page {index + 1}", fontsize=14)
        page.draw_rect(fitz.Rect(72, 100, 520, 300), color=(0.2, 0.4, 0.8), width=1.5)
    doc_bytes = doc.tobytes()
    doc.close()
    return doc_bytes


def make_sized_payload(size: int) -> bytes:
    """PDF-headed payload of exactly ``size`` bytes; only the length matters to the upload limit."""
    header = b"%PDF-1.7\n"
    if size <= len(header):
        return header[:size]
    return header + b"0" * (size - len(header))

from __future__ import annotations

import json
import os

import fitz
import httpx


def _make_smoke_pdf() -> bytes:
    doc = fitz.open()
    page = doc.new_page(width=400, height=400)
    page.draw_rect(fitz.Rect(50, 50, 350, 200), color=(0.1, 0.3, 0.6), fill=(0.1, 0.3, 0.6))
    page.insert_text((70, 110), "Document Portal Smoke Test", fontsize=14, color=(1, 1, 1))
    payload = doc.tobytes()
    doc.close()
    return payload


def main() -> int:
    base_url = os.getenv("DOCPORTAL_SMOKE_API_BASE_URL", "http://localhost:8000").rstrip("/")
    client = httpx.Client(base_url=base_url, timeout=30)
    pdf_bytes = _make_smoke_pdf()

    upload = client.post(
        "/documents/upload",
        files={"file": ("smoke.pdf", pdf_bytes, "application/pdf")},
    )
    upload.raise_for_status()
    doc_id = upload.json()["document"]["id"]

    listing = client.get("/documents")
    listing.raise_for_status()
    if doc_id not in {item["id"] for item in listing.json()["documents"]}:
        raise RuntimeError("Uploaded document missing from listing")

    download = client.get(f"/documents/{doc_id}")
    download.raise_for_status()
    if download.content != pdf_bytes:
        raise RuntimeError("Downloaded bytes differ from upload")

    delete = client.delete(f"/documents/{doc_id}")
    delete.raise_for_status()
    if client.get(f"/documents/{doc_id}").status_code != 404:
        raise RuntimeError("Deleted document still retrievable")

    print(json.dumps({"status": "ok", "doc_id": doc_id}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from conftest import make_corrupt_pptx_zip, make_pdf, make_png, make_pptx_zip


def test_extract_pdf(anon_client, small_render):
    r = anon_client.post(
        "/v1/extract/pdf", files={"file": ("deck.pdf", make_pdf(3), "application/pdf")}
    )
    assert r.status_code == 200
    images = r.json()["images"]
    assert [i["slideNumber"] for i in images] == [0, 1, 2]
    assert [i["type"] for i in images] == ["title", "front", "back"]
    assert images[0]["dataUrl"].startswith("data:image/png;base64,")


def test_extract_pdf_without_file(anon_client):
    r = anon_client.post("/v1/extract/pdf")
    assert r.status_code == 400
    assert r.json() == {"error": "No file provided"}


def test_extract_pdf_unreadable(anon_client):
    r = anon_client.post(
        "/v1/extract/pdf", files={"file": ("deck.pdf", b"garbage", "application/pdf")}
    )
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Failed to extract PDF"
    assert set(body["details"]) == {"message", "code"}


def test_extract_pptx(anon_client):
    deck = make_pptx_zip({"ppt/media/image1.png": make_png(), "ppt/media/image2.png": make_png("blue")})
    r = anon_client.post("/v1/extract/pptx", files={"file": ("deck.pptx", deck)})
    assert r.status_code == 200
    assert [i["type"] for i in r.json()["images"]] == ["title", "front"]


def test_extract_pptx_unreadable(anon_client):
    r = anon_client.post("/v1/extract/pptx", files={"file": ("deck.pptx", b"not a zip")})
    assert r.status_code == 500
    assert r.json()["error"].startswith("Failed to extract PPT")


def test_extract_pptx_corrupt_member(anon_client):
    r = anon_client.post(
        "/v1/extract/pptx", files={"file": ("deck.pptx", make_corrupt_pptx_zip())}
    )
    assert r.status_code == 500
    assert r.json()["error"].startswith("Failed to extract PPT")


def _record_thread(seen):
    import asyncio

    def extract(data):
        try:
            asyncio.get_running_loop()
            seen.append("loop")
        except RuntimeError:
            seen.append("worker")
        return []

    return extract


def test_extraction_runs_off_the_event_loop(anon_client, monkeypatch):
    from app.apis.extraction import main

    seen = []
    monkeypatch.setattr(main, "extract_pdf_slides", _record_thread(seen))
    monkeypatch.setattr(main, "extract_pptx_slides", _record_thread(seen))

    r = anon_client.post(
        "/v1/extract/pdf", files={"file": ("deck.pdf", make_pdf(1), "application/pdf")}
    )
    assert r.status_code == 200
    r = anon_client.post("/v1/extract/pptx", files={"file": ("deck.pptx", b"PK")})
    assert r.status_code == 200
    assert seen == ["worker", "worker"]

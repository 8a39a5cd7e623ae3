import pytest

from conftest import make_pdf, make_png


@pytest.fixture
def slides(client, small_render):
    r = client.post(
        "/v1/flashcards/slides",
        files={"file": ("deck.pdf", make_pdf(5), "application/pdf")},
    )
    assert r.status_code == 201, r.text
    return r.json()["slides"]


def _create(client, slides, /, **overrides):
    payload = {
        "title": "  Cell Structure ",
        "description": " Organelles ",
        "standard": "9th",
        "subject": "science-2",
        "slides": slides,
        "publish": True,
    }
    payload.update(overrides)
    return client.post("/v1/flashcards/sets", json=payload)


def test_process_slides_uploads_images(client, slides):
    assert [s["type"] for s in slides] == ["title", "front", "back", "front", "back"]
    assert all(s["imageUrl"] == f"/v1/files/{s['imageId']}/view" for s in slides)

    view = client.get(slides[0]["imageUrl"])
    assert view.status_code == 200
    assert view.content.startswith(b"\x89PNG")


def test_process_slides_rejects_non_pdf(client):
    r = client.post(
        "/v1/flashcards/slides",
        files={"file": ("deck.pptx", b"PK", "application/octet-stream")},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Please upload a PDF file only"


def test_process_slides_empty_pdf(client, monkeypatch):
    from app.modules.flashcards import creator

    monkeypatch.setattr(creator, "extract_pdf_slides", lambda data: [])
    r = client.post(
        "/v1/flashcards/slides",
        files={"file": ("deck.pdf", make_pdf(1), "application/pdf")},
    )
    assert r.status_code == 422
    assert r.json()["detail"] == "No images found in PDF"


def test_publish_and_read_back(client, slides):
    r = _create(client, slides)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Flashcard set published successfully!"
    created = body["set"]
    assert created["title"] == "Cell Structure"
    assert created["description"] == "Organelles"
    assert created["flashcard_count"] == 2
    assert created["created_by_name"] == "Asha"
    assert created["subject_label"] == "Science 2"

    detail = client.get(f"/v1/flashcards/sets/{created['id']}").json()
    assert detail["title_image_id"] == slides[0]["imageId"]
    cards = detail["flashcards"]
    assert [c["card_number"] for c in cards] == [1, 2]
    assert cards[0]["front_image_id"] == slides[1]["imageId"]
    assert cards[0]["back_image_id"] == slides[2]["imageId"]
    assert cards[1]["back_image_url"] == f"/v1/files/{slides[4]['imageId']}/view"


def test_save_draft_message(client, slides):
    r = _create(client, slides, publish=False)
    assert r.json()["message"] == "Flashcard set saved as draft!"
    assert r.json()["set"]["published"] is False


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"title": "   "}, "Please enter a title"),
        ({"standard": ""}, "Please select a standard"),
        ({"subject": ""}, "Please select a subject"),
        ({"subject": "physics"}, "Please select a subject"),
        ({"slides": []}, "Please upload and process a presentation file"),
    ],
)
def test_validation_messages(client, slides, overrides, message):
    r = _create(client, slides, **overrides)
    assert r.status_code == 400
    assert r.json()["detail"] == message


def test_unknown_file_ids_rejected(client):
    fake = [{"slideNumber": 0, "imageId": "f" * 32, "type": "title"}]
    r = _create(client, fake)
    assert r.status_code == 400
    assert "Unknown file id" in r.json()["detail"]


def test_thumbnail_is_linked(client, slides):
    thumb = client.post(
        "/v1/files", files={"file": ("cover.png", make_png(), "image/png")}
    ).json()
    created = _create(client, slides, thumbnail_id=thumb["id"]).json()["set"]
    assert created["thumbnail_url"] == thumb["view_url"]


def test_browse_search_and_views(client, slides):
    _create(client, slides, title="Cells", standard="9th", subject="science-2")
    _create(client, slides, title="Optics", standard="12th-sci", subject="physics",
            description="Lenses and mirrors")
    _create(client, slides, title="Hidden draft", publish=False)

    grid = client.get("/v1/flashcards/sets").json()
    assert grid["view"] == "grid"
    assert [s["title"] for s in grid["items"]] == ["Optics", "Cells"]
    assert "description" in grid["items"][0]

    rows = client.get("/v1/flashcards/sets", params={"view": "list"}).json()
    assert rows["total"] == 2
    assert "description" not in rows["items"][0]

    found = client.get("/v1/flashcards/sets", params={"search": "MIRROR"}).json()
    assert [s["title"] for s in found["items"]] == ["Optics"]

    by_author = client.get("/v1/flashcards/sets", params={"search": "asha"}).json()
    assert by_author["total"] == 2

    ninth = client.get("/v1/flashcards/sets", params={"standard": "9th"}).json()
    assert [s["title"] for s in ninth["items"]] == ["Cells"]


def test_catalog_groups(client, slides):
    _create(client, slides, title="Optics", standard="12th-sci", subject="physics")
    _create(client, slides, title="Poems", standard="9th", subject="english")
    _create(client, slides, title="Cells", standard="9th", subject="science-2")

    catalog = client.get("/v1/flashcards/catalog").json()
    assert catalog["total"] == 3
    assert [g["standard"] for g in catalog["standards"]] == ["9th", "12th-sci"]
    ninth = catalog["standards"][0]
    assert [s["subject"] for s in ninth["subjects"]] == ["english", "science-2"]


def test_drafts_visible_only_to_owner(client, slides, login_as, other_user):
    draft = _create(client, slides, publish=False).json()["set"]

    mine = client.get("/v1/flashcards/sets/mine").json()
    assert [s["id"] for s in mine] == [draft["id"]]
    assert client.get(f"/v1/flashcards/sets/{draft['id']}").status_code == 200

    login_as(other_user)
    assert client.get(f"/v1/flashcards/sets/{draft['id']}").status_code == 404
    assert client.get("/v1/flashcards/sets/mine").json() == []

    login_as(None)
    assert client.get(f"/v1/flashcards/sets/{draft['id']}").status_code == 404


def test_missing_set(client):
    assert client.get("/v1/flashcards/sets/9999").status_code == 404


def test_search_treats_wildcards_literally(client, slides):
    _create(client, slides, title="Cells", description="Organelles")
    _create(client, slides, title="100% Recall", description="snake_case terms")

    def titles(search):
        r = client.get("/v1/flashcards/sets", params={"search": search})
        return [s["title"] for s in r.json()["items"]]

    assert titles("%") == ["100% Recall"]
    assert titles("_") == ["100% Recall"]
    assert titles("e_c") == ["100% Recall"]
    assert titles("c_lls") == []
    assert titles("CELL") == ["Cells"]


def test_catalog_respects_search_and_standard(client, slides):
    _create(client, slides, title="Optics", standard="12th-sci", subject="physics")
    _create(client, slides, title="Cells", standard="9th", subject="science-2")

    by_search = client.get("/v1/flashcards/catalog", params={"search": "opt"}).json()
    assert by_search["total"] == 1
    assert by_search["standards"][0]["standard"] == "12th-sci"

    by_standard = client.get("/v1/flashcards/catalog", params={"standard": "9th"}).json()
    assert [g["standard"] for g in by_standard["standards"]] == ["9th"]


def test_failed_upload_batch_leaves_no_files(client, small_render, monkeypatch):
    from app.core.storage import StorageError, storage

    real_save = storage.save
    calls = []

    def save(data, **kwargs):
        calls.append(kwargs["filename"])
        if len(calls) == 3:
            raise StorageError("File too large")
        return real_save(data, **kwargs)

    before = {p for p in storage.base_dir.rglob("*") if p.is_file()}
    monkeypatch.setattr(storage, "save", save)
    r = client.post(
        "/v1/flashcards/slides",
        files={"file": ("deck.pdf", make_pdf(5), "application/pdf")},
    )
    assert r.status_code == 413
    assert len(calls) == 3
    assert {p for p in storage.base_dir.rglob("*") if p.is_file()} == before


def test_process_slides_extracts_off_the_event_loop(client, monkeypatch):
    import asyncio

    from app.modules.extraction import ExtractedImage
    from app.modules.flashcards import creator

    seen = []

    def extract(data):
        try:
            asyncio.get_running_loop()
            seen.append("loop")
        except RuntimeError:
            seen.append("worker")
        return [ExtractedImage(slide_number=0, data_url=_png_url(), kind="title")]

    monkeypatch.setattr(creator, "extract_pdf_slides", extract)
    r = client.post(
        "/v1/flashcards/slides",
        files={"file": ("deck.pdf", make_pdf(1), "application/pdf")},
    )
    assert r.status_code == 201, r.text
    assert seen == ["worker"]


def _png_url():
    from app.core.storage import encode_data_url

    return encode_data_url(make_png())

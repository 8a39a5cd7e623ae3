import pytest

from app.core.storage import (
    FileStorage,
    StorageError,
    decode_data_url,
    encode_data_url,
    file_view_url,
)


def test_data_url_round_trip():
    url = encode_data_url(b"\x89PNG\r\n", "image/png")
    assert url.startswith("data:image/png;base64,")
    decoded = decode_data_url(url)
    assert decoded.content_type == "image/png"
    assert decoded.data == b"\x89PNG\r\n"


def test_decode_rejects_garbage():
    with pytest.raises(StorageError):
        decode_data_url("http://example.com/a.png")
    with pytest.raises(StorageError):
        decode_data_url("data:image/png;base64,@@@")


def test_save_and_read(tmp_path):
    store = FileStorage(tmp_path)
    rel = store.save(b"abc", bucket="flashcards", file_id="f1", filename="slide-0.png")

    assert str(rel).replace("\\", "/") == "flashcards/f1.png"
    assert store.resolve(rel).read_bytes() == b"abc"
    assert store.delete(rel)
    assert not store.delete(rel)


def test_extension_from_content_type(tmp_path):
    store = FileStorage(tmp_path)
    rel = store.save(b"x", bucket="b", file_id="f2", filename="thumb", content_type="image/jpeg")
    assert rel.suffix in (".jpg", ".jpeg")


def test_upload_limit(tmp_path):
    store = FileStorage(tmp_path, max_bytes=2)
    with pytest.raises(StorageError):
        store.save(b"abc", bucket="b", file_id="f3", filename="a.png")


def test_resolve_stays_inside_root(tmp_path):
    store = FileStorage(tmp_path / "root")
    (tmp_path / "secret.txt").write_text("nope")
    with pytest.raises(StorageError):
        store.resolve("../secret.txt")


def test_file_view_url():
    assert file_view_url("abc") == "/v1/files/abc/view"
    assert file_view_url("") is None

import pytest

from gradebook.services.sanitizer import HtmlSanitizer
from gradebook.utils.storage import LocalFileStorage


def test_upload_writes_under_root_with_random_name(tmp_path):
    storage = LocalFileStorage(tmp_path)
    stored = storage.upload(
        b"data", original_name="My Report.PDF", mime_type="application/pdf", size=4, directory="assignments/a-1"
    )
    assert stored.original_name == "My Report.PDF"
    assert stored.path.startswith("assignments/a-1/")
    assert stored.path.endswith(".pdf")
    assert "My Report" not in stored.path
    assert (tmp_path / "assignments" / "a-1").is_dir()
    assert storage.resolve(stored.path).read_bytes() == b"data"


@pytest.mark.parametrize("directory", ["../outside", "/etc"])
def test_upload_rejects_escaping_directory(tmp_path, directory):
    storage = LocalFileStorage(tmp_path)
    with pytest.raises(ValueError):
        storage.upload(b"x", original_name="a.pdf", mime_type="application/pdf", size=1, directory=directory)


def test_sanitizer_keeps_formatting_tags():
    html = "<h2>Title</h2><p><strong>bold</strong> <em>it</em></p><ul><li>one</li></ul>"
    assert HtmlSanitizer().sanitize(html) == html


def test_sanitizer_strips_disallowed_markup():
    cleaned = HtmlSanitizer().sanitize(
        '<div style="color:red"><img src=x onerror=alert(1)>text</div>'
        '<a href="https://example.com" target="_blank" onclick="evil()">link</a>'
    )
    assert "<div" not in cleaned
    assert "<img" not in cleaned
    assert "onclick" not in cleaned
    assert '<a href="https://example.com" target="_blank">link</a>' in cleaned


def test_sanitizer_custom_allow_list():
    cleaned = HtmlSanitizer().sanitize("<p><b>x</b></p>", allowed_tags=["b"], allowed_attributes={})
    assert cleaned == "<b>x</b>"


def test_delete_removes_stored_file(tmp_path):
    storage = LocalFileStorage(tmp_path)
    stored = storage.upload(b"x", original_name="a.pdf", mime_type="application/pdf", size=1, directory="d")
    storage.delete(stored.path)
    assert not storage.resolve(stored.path).exists()
    # 再次删除不报错
    storage.delete(stored.path)

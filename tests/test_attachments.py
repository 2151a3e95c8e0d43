import pytest

from gigline.attachments import Attachment, attachment_url, find_url, media_kind, normalize_url
from gigline.errors import AttachmentError
from gigline.models.conversation import Message
from tests.conftest import OTHER, message

BASE = "https://api.test/v1"


def test_relative_url_resolves_against_api_origin():
    assert normalize_url("/uploads/a.png", BASE) == "https://api.test/uploads/a.png"
    assert normalize_url("uploads/a.png", BASE) == "https://api.test/uploads/a.png"


def test_protocol_relative_url_gets_https():
    assert normalize_url("//cdn.example.com/v.mp4", BASE) == "https://cdn.example.com/v.mp4"


def test_absolute_url_passes_through():
    url = "http://media.example.com/file.pdf"
    assert normalize_url(url, BASE) == url


def test_find_url_in_content():
    assert find_url("look: https://x.io/a.jpg nice") == "https://x.io/a.jpg"
    assert find_url("just words") is None
    assert find_url(None) is None


def test_attachment_url_prefers_explicit_fields():
    m = Message.model_validate({**message("1", OTHER, "see https://x.io/b.png"), "mediaUrl": "/uploads/c.mp4"})
    assert attachment_url(m) == "/uploads/c.mp4"
    plain = Message.model_validate(message("2", OTHER, "see https://x.io/b.png"))
    assert attachment_url(plain) == "https://x.io/b.png"


@pytest.mark.parametrize("url,kind", [
    ("https://x.io/a.JPG", "image"),
    ("/uploads/clip.webm", "video"),
    ("/uploads/contract.pdf?sig=1", "document"),
])
def test_media_kind(url, kind):
    assert media_kind(url) == kind


@pytest.mark.parametrize("mime,kind", [
    ("image/png", "image"),
    ("video/mp4", "video"),
    ("application/pdf", None),
])
def test_attachment_kind(mime, kind):
    assert Attachment("f", b"", mime).kind == kind


def test_image_allow_list():
    Attachment("a.gif", b"", "image/gif").validate()
    with pytest.raises(AttachmentError) as exc:
        Attachment("a.bmp", b"", "image/bmp").validate()
    assert exc.value.mime_type == "image/bmp"


def test_from_path_guesses_type(tmp_path):
    p = tmp_path / "poster.png"
    p.write_bytes(b"\x89PNG")
    a = Attachment.from_path(p)
    assert a.mime_type == "image/png"
    assert a.as_upload() == ("poster.png", b"\x89PNG", "image/png")

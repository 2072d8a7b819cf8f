import pytest

from share_saver.core.mime import MimeRegistry, normalize_mime_type


class TestExtensionForMime:
    @pytest.mark.parametrize(
        "mime_type, extension",
        [
            ("image/jpeg", "jpg"),
            ("image/png", "png"),
            ("video/mp4", "mp4"),
            ("text/plain", "txt"),
            ("IMAGE/PNG; charset=binary", "png"),
        ],
    )
    def test_known_types(self, registry, mime_type, extension):
        assert registry.extension_for_mime(mime_type) == extension

    @pytest.mark.parametrize(
        "mime_type", [None, "", "image/*", "application/octet-stream", "x/unknown"]
    )
    def test_no_extension(self, registry, mime_type):
        assert registry.extension_for_mime(mime_type) is None

    def test_overrides(self):
        registry = MimeRegistry(overrides={"image/png": "PNG"})
        assert registry.extension_for_mime("image/png") == "PNG"


class TestHasKnownExtension:
    @pytest.mark.parametrize("filename", ["a.jpg", "a.JPEG", "clip.mp4", "notes.txt", "v1.2.png"])
    def test_known(self, registry, filename):
        assert registry.has_known_extension(filename) is True

    @pytest.mark.parametrize("filename", ["", "My", "archive.", "file.notanext", ".hidden"])
    def test_unknown(self, registry, filename):
        assert registry.has_known_extension(filename) is False


class TestMimeForUrl:
    def test_extension_lookup(self, registry):
        assert registry.mime_for_url("http://example.com/pic.jpg") == "image/jpeg"

    def test_ignores_query_and_fragment(self, registry):
        assert registry.mime_for_url("https://example.com/a/clip.mp4?x=1#t=3") == "video/mp4"

    def test_no_extension(self, registry):
        assert registry.mime_for_url("http://example.com/unknown") is None

    def test_unknown_extension(self, registry):
        assert registry.mime_for_url("http://example.com/file.zzz") is None

    def test_extension_from_url(self):
        assert MimeRegistry.extension_from_url("http://example.com/a/b.PNG") == "PNG"
        assert MimeRegistry.extension_from_url("http://example.com/") is None
        assert MimeRegistry.extension_from_url("") is None


class TestNormalizeMimeType:
    def test_parameters_dropped(self):
        assert normalize_mime_type("Text/HTML; charset=UTF-8") == "text/html"

    def test_empty(self):
        assert normalize_mime_type("") is None
        assert normalize_mime_type(None) is None

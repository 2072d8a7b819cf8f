import pytest

from share_saver.core.exceptions import NetworkProbeError
from share_saver.core.models import DiagnosticCollector
from share_saver.core.prober import parse_url
from tests.conftest import content_type_transport, failing_transport


class TestParseUrl:
    @pytest.mark.parametrize(
        "text",
        [
            "http://example.com",
            "https://example.com/pic.jpg",
            "  https://example.com/a?b=c  ",
            "ftp://files.example.com/clip.mp4",
        ],
    )
    def test_urls(self, text):
        assert parse_url(text) == text.strip()

    @pytest.mark.parametrize(
        "text",
        [
            None,
            "",
            "not a url",
            "example.com/pic.jpg",
            "mailto:someone@example.com",
            "http://[oops",
            "https://[::1/pic.jpg",
            "https://",
            "look at https://example.com/pic.jpg",
        ],
    )
    def test_not_urls(self, text):
        assert parse_url(text) is None


class TestContentProber:
    async def test_plain_text(self, make_prober):
        transport = content_type_transport("image/png")
        result = await make_prober(transport).probe("not a url")

        assert result.is_url is False
        assert result.mime_type == "text/plain"
        assert transport.requests == []

    async def test_malformed_url_is_plain_text(self, make_prober):
        transport = content_type_transport("image/png")
        result = await make_prober(transport).probe("http://[oops")

        assert result.is_url is False
        assert result.mime_type == "text/plain"
        assert transport.requests == []

    async def test_extension_lookup_skips_network(self, make_prober):
        transport = content_type_transport("text/html")
        diagnostics = DiagnosticCollector()

        result = await make_prober(transport).probe("http://example.com/pic.jpg", diagnostics)

        assert result.is_url is True
        assert result.mime_type == "image/jpeg"
        assert transport.requests == []
        assert diagnostics.as_dict() == {"URL Content-Type": "image/jpeg"}

    async def test_header_lookup(self, make_prober):
        transport = content_type_transport("video/mp4; codecs=avc1")
        diagnostics = DiagnosticCollector()

        result = await make_prober(transport).probe("https://example.com/watch", diagnostics)

        assert result.is_url is True
        assert result.mime_type == "video/mp4"
        assert len(transport.requests) == 1
        assert transport.requests[0].method == "HEAD"
        assert diagnostics.as_dict() == {"URL Content-Type": "video/mp4; codecs=avc1"}

    async def test_no_type_anywhere(self, make_prober):
        transport = content_type_transport(None)
        diagnostics = DiagnosticCollector()

        result = await make_prober(transport).probe("http://example.com/unknown", diagnostics)

        assert result.is_url is True
        assert result.mime_type is None
        assert len(diagnostics) == 0

    async def test_network_failure(self, make_prober):
        with pytest.raises(NetworkProbeError, match="Failed to probe URL") as exc_info:
            await make_prober(failing_transport()).probe("http://example.com/unknown")

        assert exc_info.value.details == {"url": "http://example.com/unknown"}

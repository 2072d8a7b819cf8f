import logging
import socket
from unittest.mock import patch

import pytest

from share_saver.__main__ import build_parser, is_port_available, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    # Keep a developer's .env or exported settings out of the CLI runs
    monkeypatch.chdir(tmp_path)
    for name in ("STORAGE_ROOT", "LOCATIONS", "HOST", "PORT", "DEBUG", "LOG_LEVEL"):
        monkeypatch.delenv(f"SHARE_SAVER_{name}", raising=False)
    yield
    logging.getLogger("share_saver").handlers.clear()


class TestSaveCommand:
    """Saving local files through the CLI."""

    def test_save_file(self, tmp_path, capsys):
        source = tmp_path / "holiday.jpg"
        source.write_bytes(b"jpeg")
        destination = tmp_path / "Pictures"
        destination.mkdir()

        code = main(
            ["save", str(source), "--type", "image/jpeg", "--root", str(destination)]
        )

        assert code == 0
        assert (destination / "holiday.jpg").read_bytes() == b"jpeg"
        assert capsys.readouterr().out.strip() == "success: holiday.jpg"

    def test_save_several_files_infers_multiple(self, tmp_path, capsys):
        sources = []
        for name in ("a.png", "b.png"):
            path = tmp_path / name
            path.write_bytes(name.encode())
            sources.append(str(path))
        destination = tmp_path / "out"
        destination.mkdir()

        code = main(["save", *sources, "--type", "image/png", "--root", str(destination)])

        assert code == 0
        assert (destination / "a.png").read_bytes() == b"a.png"
        assert (destination / "b.png").read_bytes() == b"b.png"

    def test_save_uses_only_configured_location(self, tmp_path, monkeypatch):
        (tmp_path / "Documents").mkdir()
        monkeypatch.setenv("SHARE_SAVER_STORAGE_ROOT", str(tmp_path))
        monkeypatch.setenv("SHARE_SAVER_LOCATIONS", '["Documents"]')

        code = main(["save", "--type", "text/plain", "--text", "hello there"])

        assert code == 0
        assert (tmp_path / "Documents" / "hello.txt").read_text() == "hello there"

    def test_save_into_named_location(self, tmp_path, monkeypatch):
        (tmp_path / "Pictures").mkdir()
        (tmp_path / "Videos").mkdir()
        source = tmp_path / "clip.mp4"
        source.write_bytes(b"frames")
        monkeypatch.setenv("SHARE_SAVER_STORAGE_ROOT", str(tmp_path))
        monkeypatch.setenv("SHARE_SAVER_LOCATIONS", '["Pictures", "Videos"]')

        code = main(["save", str(source), "--type", "video/mp4", "--location", "Videos"])

        assert code == 0
        assert (tmp_path / "Videos" / "clip.mp4").read_bytes() == b"frames"
        assert list((tmp_path / "Pictures").iterdir()) == []

    def test_unknown_location(self, tmp_path, monkeypatch, capsys):
        source = tmp_path / "a.png"
        source.write_bytes(b"a")
        monkeypatch.setenv("SHARE_SAVER_STORAGE_ROOT", str(tmp_path))
        monkeypatch.setenv("SHARE_SAVER_LOCATIONS", '["Pictures"]')

        code = main(["save", str(source), "--type", "image/png", "--location", str(tmp_path)])

        assert code == 1
        assert "Unknown save location" in capsys.readouterr().err

    def test_dry_run(self, tmp_path, capsys):
        code = main(["save", "--type", "text/plain", "--text", "just checking", "--dry-run"])

        assert code == 0
        assert capsys.readouterr().out.strip() == "success: just.txt"
        assert not (tmp_path / "just.txt").exists()

    def test_unsupported_share(self, tmp_path, capsys):
        code = main(["save", "--type", "application/pdf", "--subject", "Invoice", "--dry-run"])

        assert code == 1
        captured = capsys.readouterr()
        assert captured.out.strip() == "failure: -"
        assert "Intent type: application/pdf" in captured.err
        assert "Subject: Invoice" in captured.err

    def test_no_location_configured(self, tmp_path, capsys):
        source = tmp_path / "a.png"
        source.write_bytes(b"a")

        code = main(["save", str(source), "--type", "image/png"])

        assert code == 1
        assert "No save locations configured" in capsys.readouterr().err

    def test_type_is_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["save", "a.png"])


class TestServeCommand:
    """Running the HTTP receiver."""

    def test_serve_defaults(self):
        with (
            patch("share_saver.__main__.uvicorn.run") as mock_run,
            patch("share_saver.__main__.is_port_available", return_value=True),
        ):
            assert main(["serve"]) == 0

            mock_run.assert_called_once()
            args, kwargs = mock_run.call_args

            from share_saver.app import app

            assert args[0] is app
            assert kwargs.get("host") == "127.0.0.1"
            assert kwargs.get("port") == 8080

    def test_serve_custom_host_port(self):
        with (
            patch("share_saver.__main__.uvicorn.run") as mock_run,
            patch("share_saver.__main__.is_port_available", return_value=True),
        ):
            main(["serve", "--host", "0.0.0.0", "--port", "9090"])

            _, kwargs = mock_run.call_args
            assert kwargs.get("host") == "0.0.0.0"
            assert kwargs.get("port") == 9090

    def test_port_conflict(self, capsys):
        with (
            patch("share_saver.__main__.uvicorn.run") as mock_run,
            patch("share_saver.__main__.is_port_available", return_value=False),
        ):
            assert main(["serve", "--port", "8080"]) == 1

            mock_run.assert_not_called()
            assert "already in use" in capsys.readouterr().err

    def test_port_validation(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("127.0.0.1", 0))
            port = sock.getsockname()[1]
            sock.listen(1)

            assert is_port_available("127.0.0.1", port) is False

        assert is_port_available("127.0.0.1", port) is True


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: share-saver" in capsys.readouterr().out

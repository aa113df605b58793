"""Tests for the studio CLI commands.

The generation client is replaced by one wired to the fake provider, so the
commands run end to end without network access.
"""

from __future__ import annotations

import importlib
import json

import pytest
from typer.testing import CliRunner

from conftest import make_response
from content_studio.cli import commands

# The package re-exports the Typer object under the module's name
app_module = importlib.import_module("content_studio.cli.app")


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def wired_client(client, monkeypatch):
    """Route every command to the fake-backed client and skip file logging."""
    monkeypatch.setattr(commands, "create_generation_client", lambda: client)
    monkeypatch.setattr(app_module, "setup_logging", lambda log_dir=None: None)
    return client


class TestTextCommands:
    """Test post and thread commands."""

    def test_tweet(self, runner, fake_genai):
        fake_genai.aio.models.generate_content.return_value = make_response("Hola pana")

        result = runner.invoke(app_module.app, ["tweet", "IA", "--tone", "storytelling"])

        assert result.exit_code == 0
        assert "Hola pana" in result.output

    def test_thread_shows_counts(self, runner, fake_genai):
        fake_genai.aio.models.generate_content.return_value = make_response(
            json.dumps({"thread": ["uno", "dos"]})
        )

        result = runner.invoke(app_module.app, ["thread", "IA"])

        assert result.exit_code == 0
        assert "Hilo 1/2" in result.output
        assert "3 caracteres" in result.output

    def test_classified_error_exits_1(self, runner, fake_genai):
        fake_genai.aio.models.generate_content.side_effect = Exception("quota")

        result = runner.invoke(app_module.app, ["tweet", "IA"])

        assert result.exit_code == 1
        assert "QuotaExceededError" in result.output

    def test_missing_attachment(self, runner, tmp_path):
        result = runner.invoke(app_module.app, ["tweet", "IA", "--file", str(tmp_path / "nope.pdf")])

        assert result.exit_code == 1
        assert "Archivo no encontrado" in result.output


class TestMediaCommands:
    """Test image output."""

    def test_image_writes_files(self, runner, fake_genai, tmp_path):
        from types import SimpleNamespace

        fake_genai.aio.models.generate_images.return_value = SimpleNamespace(
            generated_images=[SimpleNamespace(image=SimpleNamespace(image_bytes=b"jpg"))]
        )

        result = runner.invoke(
            app_module.app,
            ["image", "Un gato", "--aspect-ratio", "9:16", "--output", str(tmp_path)],
        )

        assert result.exit_code == 0
        written = list(tmp_path.glob("image-1.*"))
        assert len(written) == 1
        assert written[0].read_bytes() == b"jpg"
        config = fake_genai.aio.models.generate_images.call_args.kwargs["config"]
        assert config.aspect_ratio == "9:16"


def test_proofread_marks_changes(runner, fake_genai):
    fake_genai.aio.models.generate_content.return_value = make_response(
        json.dumps({"corrected_thread": ["Hola", "Adiós"]})
    )

    result = runner.invoke(app_module.app, ["proofread", "Hola", "Adios"])

    assert result.exit_code == 0
    assert "sin cambios" in result.output
    assert "corregido" in result.output


def test_encoded_attachment_is_sent(runner, fake_genai, tmp_path):
    path = tmp_path / "notes.txt"
    path.write_bytes(b"apuntes")

    result = runner.invoke(app_module.app, ["tweet", "IA", "--file", str(path)])

    assert result.exit_code == 0
    contents = fake_genai.aio.models.generate_content.call_args.kwargs["contents"]
    assert contents[1].inline_data.data == b"apuntes"
    assert contents[1].inline_data.mime_type == "text/plain"

"""Tests for request modes."""

import pytest

from content_studio.content.responses import ThreadResponse
from content_studio.providers.modes import (
    PlainMode,
    SchemaMode,
    ToolMode,
    build_content_config,
    mode_name,
)


class TestBuildContentConfig:
    """Test that schema and tools are never combined."""

    def test_schema_mode(self):
        config = build_content_config(SchemaMode(ThreadResponse), "sistema")
        assert config.response_mime_type == "application/json"
        assert config.response_schema is ThreadResponse
        assert not config.tools
        assert config.system_instruction == "sistema"

    def test_tool_mode(self):
        config = build_content_config(ToolMode())
        assert len(config.tools) == 1
        assert config.tools[0].google_search is not None
        assert config.response_schema is None
        assert config.response_mime_type is None

    def test_plain_mode(self):
        config = build_content_config(PlainMode())
        assert not config.tools
        assert config.response_schema is None
        assert config.system_instruction is None

    def test_plain_mode_with_modalities(self):
        config = build_content_config(PlainMode(response_modalities=("IMAGE", "TEXT")))
        assert config.response_modalities == ["IMAGE", "TEXT"]

    def test_unknown_mode(self):
        with pytest.raises(TypeError):
            build_content_config("json")

    def test_modes_are_immutable(self):
        mode = ToolMode()
        with pytest.raises(AttributeError):
            mode.tools = ()


def test_mode_names():
    assert mode_name(SchemaMode(ThreadResponse)) == "schema:ThreadResponse"
    assert mode_name(ToolMode()) == "tools:google_search"
    assert mode_name(PlainMode()) == "plain"

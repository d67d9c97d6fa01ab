"""
Tests for the mise config.toml generator.
"""

import logging
import tomllib
from pathlib import Path

import pytest

from src.core.models import MiseTool
from src.core.services.generators.mise_config import (
    ENV_PASSTHROUGHS,
    format_key,
    generate_mise_config,
    render_mise_config,
    render_tools,
)

TOOLS = [
    MiseTool("aqua:junegunn/fzf", "v0.67.0"),
    MiseTool("just", "1.40.0"),
    MiseTool("pipx[uvx=true]", "latest"),
    MiseTool("node", "22"),
]


def _tools_section(content: str) -> str:
    return content.split("[tools]\n", 1)[1]


class TestFormatKey:
    @pytest.mark.parametrize("key", ["node", "just", "go_tool", "rust-analyzer", "Node22"])
    def test_bare(self, key: str):
        assert format_key(key) == key

    @pytest.mark.parametrize(
        "key", ["aqua:junegunn/fzf", "pipx[uvx=true]", "npm:@scope/pkg", "a.b", "a b"]
    )
    def test_quoted(self, key: str):
        assert format_key(key) == f'"{key}"'

    def test_trailing_newline_quoted(self):
        assert format_key("node\n") == '"node\\n"'


class TestRenderTools:
    def test_backend_example(self):
        assert render_tools([MiseTool("aqua:junegunn/fzf", "v0.67.0")]) == (
            '"aqua:junegunn/fzf" = "v0.67.0"\n'
        )

    def test_unversioned_skipped(self):
        assert render_tools([MiseTool("yq", ""), MiseTool("node", "22")]) == 'node = "22"\n'

    def test_empty(self):
        assert render_tools([]) == ""

    def test_escapes_quotes(self):
        line = render_tools([MiseTool("x", 'a"b')])
        assert tomllib.loads(line)["x"] == 'a"b'

    def test_escapes_control_characters(self):
        line = render_tools([MiseTool("x", "1.0\n2\t\x01")])
        assert "\n" not in line.rstrip("\n")
        assert tomllib.loads(line)["x"] == "1.0\n2\t\x01"

    def test_duplicate_key_last_wins(self, caplog):
        tools = [MiseTool("node", "20"), MiseTool("just", "1.40.0"), MiseTool("node", "22")]
        with caplog.at_level(logging.WARNING, logger="src.core.services.generators.mise_config"):
            section = render_tools(tools)
        assert section == 'node = "22"\njust = "1.40.0"\n'
        assert "'node' defined more than once" in caplog.text

    def test_duplicate_backend_key(self):
        tools = [MiseTool("aqua:junegunn/fzf", "v0.66.0"), MiseTool("aqua:junegunn/fzf", "v0.67.0")]
        assert tomllib.loads(render_tools(tools)) == {"aqua:junegunn/fzf": "v0.67.0"}


class TestRenderMiseConfig:
    def test_section_order(self):
        content = render_mise_config(TOOLS)
        assert content.index("[settings]") < content.index("[env]") < content.index("[tools]")

    def test_env_passthroughs_deferred(self):
        content = render_mise_config(TOOLS)
        for name in ENV_PASSTHROUGHS:
            assert f"{name} = \"{{{{ get_env(name='{name}', default='') }}}}\"" in content
        assert 'HTTP_PROXY = "{{ get_env(name=\'HTTP_PROXY\', default=\'\') }}"' in content

    def test_custom_passthroughs(self):
        content = render_mise_config(TOOLS, env_passthroughs=["CORP_TOKEN"])
        assert "CORP_TOKEN = " in content
        assert "HTTP_PROXY" not in content

    def test_idempotent(self):
        assert render_mise_config(TOOLS) == render_mise_config(list(TOOLS))

    def test_valid_toml_round_trip(self):
        data = tomllib.loads(render_mise_config(TOOLS))
        assert data["settings"]["experimental"] is True
        assert data["settings"]["jobs"] == 6
        assert list(data["tools"].items()) == [(t.key, t.version) for t in TOOLS]

    def test_tools_section_only_versioned(self):
        content = render_mise_config(TOOLS + [MiseTool("yq", "")])
        assert "yq" not in _tools_section(content)

    def test_header_override(self):
        content = render_mise_config(TOOLS, header="[settings]\njobs = 2\n")
        assert content.startswith("[settings]\njobs = 2\n\n[tools]\n")


class TestGenerateMiseConfig:
    def test_writes_file(self, tmp_path: Path):
        dest = tmp_path / "mise" / "config.toml"
        generated = generate_mise_config(TOOLS, dest)
        assert dest.read_text() == generated.content
        assert generated.path == str(dest)
        assert "4 tools" in generated.reason

    def test_overwrites_hand_edits(self, tmp_path: Path):
        dest = tmp_path / "config.toml"
        dest.write_text('[tools]\nhand-edited = "1"\n')
        generate_mise_config(TOOLS, dest)
        content = dest.read_text()
        assert "hand-edited" not in content
        assert content == render_mise_config(TOOLS)

    def test_regenerate_byte_identical(self, tmp_path: Path):
        dest = tmp_path / "config.toml"
        generate_mise_config(TOOLS, dest)
        first = dest.read_bytes()
        generate_mise_config(TOOLS, dest)
        assert dest.read_bytes() == first

    def test_no_temp_files_left(self, tmp_path: Path):
        generate_mise_config(TOOLS, tmp_path / "config.toml")
        assert [p.name for p in tmp_path.iterdir()] == ["config.toml"]

    def test_template_header(self, tmp_path: Path, fixtures_dir: Path):
        dest = tmp_path / "config.toml"
        generate_mise_config(TOOLS, dest, template=fixtures_dir / "mise-template.toml")
        data = tomllib.loads(dest.read_text())
        assert data["env"] == {"CUSTOM_VAR": "from-template"}
        assert data["settings"]["jobs"] == 4
        # template's own pins are discarded
        assert "node" in data["tools"] and data["tools"]["node"] == "22"
        assert dest.read_text().count("[tools]") == 1

    def test_missing_template_uses_default(self, tmp_path: Path):
        dest = tmp_path / "config.toml"
        generate_mise_config(TOOLS, dest, template=tmp_path / "nope.toml")
        assert dest.read_text() == render_mise_config(TOOLS)

    def test_env_passthroughs(self, tmp_path: Path):
        dest = tmp_path / "config.toml"
        generate_mise_config(TOOLS, dest, env_passthroughs=["CORP_TOKEN"])
        env = tomllib.loads(dest.read_text())["env"]
        assert "CORP_TOKEN" in env
        assert "HTTP_PROXY" not in env

    def test_core_and_pack_same_tool(self, tmp_path: Path):
        dest = tmp_path / "config.toml"
        generated = generate_mise_config([MiseTool("node", "20"), MiseTool("node", "22")], dest)
        assert tomllib.loads(dest.read_text())["tools"] == {"node": "22"}
        assert "1 tools" in generated.reason

"""
mise config.toml generator — render resolved mise tools as TOML.

The file is regenerated wholesale on every run: it is never read
back or merged with what is already at the destination. Environment
passthroughs are written as mise templates, so proxy and registry
values are looked up when mise activates, not baked in here.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

from src.core.models.manifest import MiseTool
from src.core.models.template import GeneratedFile
from src.core.persistence.file_write import write_atomic

logger = logging.getLogger(__name__)

# Variables mise resolves from the runtime environment at activation
ENV_PASSTHROUGHS: tuple[str, ...] = (
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "NO_PROXY",
    "http_proxy",
    "https_proxy",
    "no_proxy",
    "PIP_INDEX_URL",
    "NPM_CONFIG_REGISTRY",
)

_HEADER = """\
# Auto-generated from packages.yaml - DO NOT EDIT DIRECTLY
# To modify tools, edit packages.yaml and re-run setup

[settings]
experimental = true
legacy_version_file = false
asdf_compat = false
jobs = 6
yes = true
http_timeout = "90s"
"""

_STATIC_ENV = (("RUBY_CONFIGURE_OPTS", "--with-openssl-dir=/usr"),)

_BARE_KEY = re.compile(r"[A-Za-z0-9_-]+")
_TOOLS_SECTION = "[tools]"

# TOML basic strings: quote, backslash and control characters
_NEEDS_ESCAPE = re.compile(r'["\\\x00-\x1f\x7f]')
_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _escape_char(match: re.Match[str]) -> str:
    char = match.group(0)
    return _ESCAPES.get(char) or f"\\u{ord(char):04X}"


def _toml_string(value: str) -> str:
    return f'"{_NEEDS_ESCAPE.sub(_escape_char, value)}"'


def format_key(key: str) -> str:
    """Quote a tool key unless it is a bare TOML key.

    Backend keys such as ``aqua:junegunn/fzf`` or ``npm:@scope/pkg``
    need quotes; plain names like ``node`` do not.
    """
    if _BARE_KEY.fullmatch(key):
        return key
    return _toml_string(key)


def env_passthrough_line(name: str) -> str:
    return f"{name} = \"{{{{ get_env(name='{name}', default='') }}}}\""


def default_header(env_passthroughs: Iterable[str] = ENV_PASSTHROUGHS) -> str:
    """The [settings] and [env] sections used when no template is given."""
    lines = [_HEADER, "[env]"]
    lines.extend(env_passthrough_line(name) for name in env_passthroughs)
    lines.extend(f"{name} = {_toml_string(value)}" for name, value in _STATIC_ENV)
    return "\n".join(lines) + "\n"


def template_header(template: Path) -> str:
    """Everything in ``template`` before its [tools] section.

    Lets a dotfiles-provided config.toml supply the settings and env
    sections; its own tool pins are discarded.
    """
    kept: list[str] = []
    for line in template.read_text(encoding="utf-8").splitlines():
        if line.strip() == _TOOLS_SECTION:
            break
        kept.append(line)
    return "\n".join(kept).rstrip("\n") + "\n"


def pinned_tools(tools: Iterable[MiseTool]) -> list[MiseTool]:
    """Tools that get a [tools] line, one per key.

    Tools without a version are left out; mise has nothing to pin.
    When a key repeats (core and a pack, or two entries sharing a
    backend) the last one in resolution order wins and keeps the
    position of the first.
    """
    pinned: dict[str, MiseTool] = {}
    for tool in tools:
        if not (tool.key and tool.version):
            continue
        previous = pinned.get(tool.key)
        if previous is not None:
            logger.warning(
                "mise tool '%s' defined more than once: using version %s over %s",
                tool.key, tool.version, previous.version,
            )
        pinned[tool.key] = tool
    return list(pinned.values())


def render_tools(tools: Iterable[MiseTool]) -> str:
    """The [tools] section body, one ``key = "version"`` line per tool."""
    lines = [
        f"{format_key(tool.key)} = {_toml_string(tool.version)}"
        for tool in pinned_tools(tools)
    ]
    return "\n".join(lines) + ("\n" if lines else "")


def render_mise_config(
    tools: Sequence[MiseTool],
    env_passthroughs: Iterable[str] = ENV_PASSTHROUGHS,
    header: str | None = None,
) -> str:
    """Render the full config.toml content.

    Args:
        tools: Resolved mise tools, in resolution order.
        env_passthroughs: Variable names deferred to the runtime env.
        header: Pre-rendered settings/env text (e.g. from a template).
            Defaults to ``default_header(env_passthroughs)``.
    """
    if header is None:
        header = default_header(env_passthroughs)
    return f"{header}\n{_TOOLS_SECTION}\n{render_tools(tools)}"


def generate_mise_config(
    tools: Sequence[MiseTool],
    destination: Path,
    template: Path | None = None,
    env_passthroughs: Iterable[str] = ENV_PASSTHROUGHS,
) -> GeneratedFile:
    """Render and write config.toml, fully replacing the destination.

    Args:
        tools: Resolved mise tools.
        destination: Where to write config.toml.
        template: Optional config.toml whose pre-[tools] part is reused.
        env_passthroughs: Variable names deferred to the runtime env.
            Ignored when a template supplies the header.

    Returns:
        GeneratedFile describing what was written.
    """
    header = None
    if template is not None and template.is_file():
        header = template_header(template)
        logger.debug("Using mise config template %s", template)

    pinned = pinned_tools(tools)
    content = render_mise_config(pinned, env_passthroughs, header=header)
    write_atomic(destination, content, prefix=".mise_config_")

    written = len(pinned)
    logger.info("Wrote mise config %s (%d tools)", destination, written)

    return GeneratedFile(
        path=str(destination),
        content=content,
        reason=f"Generated mise config for {written} tools",
    )

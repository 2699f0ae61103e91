"""Helper filters and functions available inside resource templates.

Filters:
    json      - serialize a value as JSON
    to_yaml   - serialize a value as block-style YAML
    b64enc    - base64-encode a string (e.g., for Secret data)
    b64dec    - decode a base64 string

Globals:
    insert_file(name)      - raw contents of a file in the resource set directory
    insert_template(name)  - another template from the set, rendered with the same variables
    pass_lookup(key)       - first line of ``pass show <key>``
    lookup_ip_addr(host)   - IPv4 addresses a hostname resolves to
"""

from __future__ import annotations

import base64
import json
import socket
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, pass_context
from jinja2.runtime import Context as TemplateContext

from kontemplate.core.errors import TemplateError
from kontemplate.deployment.shell_commands.runner import CommandRunner


def to_json(value: Any) -> str:
    return json.dumps(value)


def to_yaml(value: Any) -> str:
    return yaml.safe_dump(value, default_flow_style=False, sort_keys=False).rstrip("\n")


def b64enc(value: Any) -> str:
    return base64.b64encode(str(value).encode("utf-8")).decode("ascii")


def b64dec(value: str) -> str:
    return base64.b64decode(value).decode("utf-8")


def lookup_ip_addr(host: str) -> list[str]:
    """Resolve a hostname to its IPv4 addresses."""
    try:
        _, _, addresses = socket.gethostbyname_ex(host)
    except OSError as e:
        raise TemplateError(f"Could not resolve host '{host}'", details=str(e)) from e
    return addresses


def make_pass_lookup(runner: CommandRunner | None = None) -> Callable[[str], str]:
    """Build the ``pass_lookup`` template function.

    Args:
        runner: Command runner used to invoke ``pass`` (defaults to a new one)
    """
    runner = runner or CommandRunner()

    def pass_lookup(key: str) -> str:
        try:
            result = runner.run(["pass", "show", key], capture_output=True)
        except OSError as e:
            raise TemplateError(f"Could not run pass for '{key}'", details=str(e)) from e

        if not result.success:
            raise TemplateError(
                f"Password lookup for '{key}' failed", details=result.stderr.strip()
            )

        # pass stores the password on the first line
        lines = result.stdout.splitlines()
        return lines[0] if lines else ""

    return pass_lookup


def make_insert_file(base_path: Path) -> Callable[[str], str]:
    def insert_file(name: str) -> str:
        file_path = base_path / name
        try:
            return file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise TemplateError(f"Could not insert file {file_path}", details=str(e)) from e

    return insert_file


@pass_context
def insert_template(context: TemplateContext, name: str) -> str:
    """Render another template of the same set with the caller's variables."""
    template = context.environment.get_template(name)
    return template.render(context.get_all())


def register_template_functions(
    env: Environment, base_path: Path, runner: CommandRunner | None = None
) -> None:
    """Install the kontemplate helpers on a Jinja2 environment."""
    env.filters["json"] = to_json
    env.filters["to_yaml"] = to_yaml
    env.filters["b64enc"] = b64enc
    env.filters["b64dec"] = b64dec

    env.globals["insert_file"] = make_insert_file(base_path)
    env.globals["insert_template"] = insert_template
    env.globals["pass_lookup"] = make_pass_lookup(runner)
    env.globals["lookup_ip_addr"] = lookup_ip_addr

"""
Built-in formats.

Every format is deterministic: output order follows token order, and no
timestamps or environment details are written.
"""

from __future__ import annotations

import json
import pprint
from typing import TYPE_CHECKING, Any

import yaml

from chuk_mcp_tokens.constants import GENERATED_HEADER
from chuk_mcp_tokens.errors import FormatError
from chuk_mcp_tokens.formats.nesting import flat_tokens, nest_tokens, plain_value
from chuk_mcp_tokens.formats.tailwind import render_tailwind_theme
from chuk_mcp_tokens.models.platform import Platform
from chuk_mcp_tokens.models.token import Token
from chuk_mcp_tokens.registry import FormattedOutput

if TYPE_CHECKING:
    from chuk_mcp_tokens.registry import TokenRegistry


def render_json_nested(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """category -> type -> name, as indented JSON."""
    nested = nest_tokens(tokens, format_name="json/nested")
    return FormattedOutput(nested, _json_text(nested, platform))


def render_json_flat(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """name -> value, as indented JSON."""
    flat = flat_tokens(tokens, format_name="json/flat")
    return FormattedOutput(flat, _json_text(flat, platform))


def render_yaml_nested(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """category -> type -> name, as block-style YAML."""
    nested = nest_tokens(tokens, format_name="yaml/nested")
    body = yaml.safe_dump(
        nested,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
    return FormattedOutput(nested, f"# {GENERATED_HEADER}\n{body}")


def render_css_variables(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """
    CSS custom properties.

    Options:
        selector (str, default ':root'): rule selector
    """
    selector = platform.option("selector", ":root")
    variables: dict[str, str] = {}
    for token in tokens:
        name = f"--{token.name}"
        if name in variables:
            raise FormatError(
                f"Duplicate CSS variable '{name}'",
                path=token.path,
                format_name="css/variables",
            )
        variables[name] = _css_value(token)

    lines = [f"/**\n * {GENERATED_HEADER}\n */\n", f"{selector} {{"]
    lines.extend(f"  {name}: {value};" for name, value in variables.items())
    lines.append("}")
    return FormattedOutput(variables, "\n".join(lines) + "\n")


def render_python_dict(tokens: list[Token], platform: Platform) -> FormattedOutput:
    """
    A Python module assigning the nested tokens to a constant.

    Options:
        variable (str, default 'TOKENS'): name of the constant
    """
    variable = platform.option("variable", "TOKENS")
    if not str(variable).isidentifier():
        raise FormatError(f"'{variable}' is not a valid Python identifier", format_name="python/dict")

    nested = nest_tokens(tokens, format_name="python/dict")
    body = pprint.pformat(nested, indent=4, width=88, sort_dicts=False)
    return FormattedOutput(nested, f'"""{GENERATED_HEADER}"""\n\n{variable} = {body}\n')


def _json_text(data: Any, platform: Platform) -> str:
    indent = platform.option("indent", 2)
    return json.dumps(data, indent=indent, ensure_ascii=False) + "\n"


def _css_value(token: Token) -> str:
    value = plain_value(token.resolved_value)
    if isinstance(value, list):
        return ", ".join(str(item) for item in value)
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise FormatError(
            f"Cannot render {type(value).__name__} as a CSS value",
            path=token.path,
            format_name="css/variables",
        )
    return str(value)


def register_builtin_formats(registry: TokenRegistry) -> None:
    """Register the built-in formats."""
    registry.register_format(
        "tailwind/theme",
        render_tailwind_theme,
        description="Tailwind theme object and CommonJS config module",
    )
    registry.register_format(
        "json/nested",
        render_json_nested,
        description="Nested JSON keyed by category/type/name",
    )
    registry.register_format(
        "json/flat",
        render_json_flat,
        description="Flat JSON of name -> value",
    )
    registry.register_format(
        "yaml/nested",
        render_yaml_nested,
        description="Nested YAML keyed by category/type/name",
    )
    registry.register_format(
        "css/variables",
        render_css_variables,
        description="CSS custom properties",
    )
    registry.register_format(
        "python/dict",
        render_python_dict,
        description="Python module with a nested TOKENS dict",
    )

#!/usr/bin/env python3
"""
Example: Building a Tailwind theme from an in-memory token tree.

Shows the resolve -> transform -> format pipeline for one platform,
then the same tree built for several platforms with the continue
failure policy.

Usage:
    python examples/build_tailwind_theme.py
"""

from chuk_mcp_tokens.builder import TokenBuilder
from chuk_mcp_tokens.errors import TokenBuildError
from chuk_mcp_tokens.models import Platform
from chuk_mcp_tokens.registry import default_registry
from chuk_mcp_tokens.resolver import resolve

TOKENS = {
    "color": {
        "primary": {"base": "#1D4ED8", "light": "#93C5FD"},
        "action": {"default": "{color.primary.base}"},
    },
    "spacing": {"small": "8px", "medium": "16px"},
    "font": {"family": {"sans": ["Inter var", "sans-serif"]}},
}


def main() -> None:
    """Demonstrate a Tailwind build."""
    print("CHUK Design Tokens Demo")
    print("=" * 40)
    print()

    print("Resolved tokens:")
    for token in resolve(TOKENS):
        print(f"  {token.dotted_path:<28} {token.category:<8} {token.name:<10} "
              f"{token.resolved_value!r}")
    print()

    registry = default_registry()
    tailwind = Platform(
        name="tailwind",
        transform_group="tailwind",
        transforms=["size/strip-unit"],
        format="tailwind/theme",
        destination="tailwind.tokens.js",
    )

    result = TokenBuilder(registry).build(TOKENS, [tailwind])
    print("tailwind.tokens.js:")
    print(result["tailwind.tokens.js"].serialized_text)

    # The broken platform doubles sizes before stripping units: a string reaches
    # size/double, so that platform fails while the others still build
    platforms = [
        tailwind,
        Platform(
            name="css",
            transform_group="css",
            format="css/variables",
            destination="tokens.css",
        ),
        Platform(
            name="broken",
            transforms=["size/double", "size/strip-unit"],
            format="json/nested",
            destination="broken.json",
        ),
    ]

    print("Fail-fast build:")
    try:
        TokenBuilder(registry).build(TOKENS, platforms)
    except TokenBuildError as e:
        print(f"  {type(e).__name__}: {e}")
    print()

    print("Continue build:")
    result = TokenBuilder(registry, stop_on_error=False).build(TOKENS, platforms)
    for destination, artifact in result.artifacts.items():
        print(f"  ok     {destination} ({artifact.token_count} tokens)")
    for failure in result.failures:
        print(f"  failed {failure}")
    print()

    print(result["tokens.css"].serialized_text)


if __name__ == "__main__":
    main()

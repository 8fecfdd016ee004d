"""
Build pipeline - composes resolve, transform and format per platform.

The pipeline:
    Token sources (YAML/JSON) -> TokenTree (immutable)
    -> Tokens (resolved per platform)
    -> Tokens (transformed)
    -> FormattedOutput (structured object + serialized text)
    -> emitted file
"""

from chuk_mcp_tokens.builder.emitter import FileEmitter
from chuk_mcp_tokens.builder.orchestrator import (
    BuildResult,
    PlatformArtifact,
    PlatformFailure,
    PlatformState,
    TokenBuilder,
    build,
)

__all__ = [
    "BuildResult",
    "FileEmitter",
    "PlatformArtifact",
    "PlatformFailure",
    "PlatformState",
    "TokenBuilder",
    "build",
]

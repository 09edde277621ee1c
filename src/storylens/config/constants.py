"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are project layout conventions, protocol identifiers, and detection weights.

For configurable values, see models.py (LinterConfig, DiagnosticsConfig, etc.).
"""

# =============================================================================
# Project Layout
# =============================================================================

MARKER_FILE = ".storyteller.json"
"""Sentinel file whose presence marks a directory as a project root."""

MAX_SEARCH_DEPTH = 20
"""Maximum parent directories walked when looking for the marker file."""

ROOT_CACHE_MAX_ENTRIES = 1024
"""Document URIs remembered by the project root detector before the oldest is evicted."""

ENTITY_DIRS: dict[str, str] = {
    "character": "src/characters",
    "setting": "src/settings",
    "foreshadowing": "src/foreshadowings",
    "timeline": "src/timelines",
}
"""Definition directory per entity kind, relative to the project root."""

DEFINITION_SUFFIXES: frozenset[str] = frozenset({".yaml", ".yml", ".json"})
"""File suffixes the default entity loader reads."""

# =============================================================================
# Detection Confidence
# =============================================================================
# Explicit references and canonical identifiers are certain; display names and
# aliases are progressively more likely to collide with ordinary prose.

CONFIDENCE_EXPLICIT = 1.0
CONFIDENCE_ID = 1.0
CONFIDENCE_NAME = 1.0
CONFIDENCE_DISPLAY_NAME = 0.9
CONFIDENCE_ALIAS = 0.8
CONFIDENCE_ANNOTATION = 1.0

# =============================================================================
# Diagnostic Sources
# =============================================================================

ENTITY_SOURCE_NAME = "storyteller"
"""Source label on diagnostics produced by entity rules."""

LINTER_SOURCE_NAME = "textlint"
"""Source label on diagnostics produced by the external linter."""

LINTER_RC_FILES: tuple[str, ...] = (
    ".textlintrc",
    ".textlintrc.json",
    ".textlintrc.yml",
    ".textlintrc.yaml",
    ".textlintrc.js",
    ".textlintrc.cjs",
)
"""Linter configuration files, in lookup order."""

# =============================================================================
# Resource Addressing
# =============================================================================

RESOURCE_SCHEME = "storyteller"
"""Scheme for MCP resource URIs (storyteller://character/hero)."""

MANUSCRIPT_DIR = "manuscripts"
"""Directory holding chapter manuscripts, relative to the project root."""

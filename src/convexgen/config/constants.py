"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
These are Convex conventions and implementation details.

For configurable values, see models.py (SkipConfig, DataLayerConfig, etc.).
"""

# =============================================================================
# Config Discovery
# =============================================================================

CONFIG_FILE_NAMES = (
    ".convex-gen.json",
    "convex-gen.json",
    ".convex-gen.yaml",
    ".convex-gen.yml",
)
"""Config file names searched in the project root, in order."""

DEFAULT_CONFIG_FILE = ".convex-gen.json"
"""File written by `convex-gen init`."""

# =============================================================================
# Convex Source Layout
# =============================================================================

SPECIAL_FILES = frozenset(
    {
        "convex.config.ts",
        "auth.config.ts",
        "crons.ts",
        "http.ts",
        "schema.ts",
        "migrations.ts",
        "index.ts",
    }
)
"""Files with framework meaning that never declare client-callable functions."""

SCHEMA_DIR_NAMES = frozenset({"schema", "schemas"})
"""Directories pruned from the function scan (scanned separately)."""

VALIDATOR_DIR_NAME = "model"
"""Directory whose `*validator.ts` / `*validators.ts` files feed the symbol table."""

VALIDATOR_FILE_SUFFIXES = ("validator.ts", "validators.ts")

# =============================================================================
# Generated Code
# =============================================================================

DEFAULT_INITIAL_NUM_ITEMS = 20
"""Page size passed to usePaginatedQuery when the caller gives none."""

SCHEMA_SPREAD_THRESHOLD = 5
"""A defineSchema object with more spreads than this (and than direct entries)
is treated as composed elsewhere and yields no tables."""

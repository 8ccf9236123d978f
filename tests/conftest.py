"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and provides a small on-disk Convex project shared by several test modules.
"""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local convexgen package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of convexgen modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("convexgen"):
        del sys.modules[module_name]

from convexgen.parse.treesitter import TypeScriptParser  # noqa: E402

WriteFiles = Callable[[Path, dict[str, str]], None]

ISSUES_QUERIES = """\
import { v } from "convex/values";
import { query } from "../_generated/server";
import { paginationOptsValidator } from "convex/server";
import { Issues } from "../model/issues/validators";

/**
 * Example in docs: export const fake = query({ args: {} })
 */
export const listIssues = query({
  args: { projectId: v.id("projects") },
  handler: async (ctx, args) => [],
});

export const byStatus = query({
  args: Issues.listValidator,
  handler: async (ctx, args) => [],
});

export const feed = query({
  args: { paginationOpts: paginationOptsValidator, label: v.optional(v.string()) },
  handler: async (ctx, args) => [],
});

export const internalStats = internalQuery({
  args: {},
  handler: async () => 0,
});
"""

ISSUES_MUTATIONS = """\
import { v } from "convex/values";
import { mutation } from "../_generated/server";

export const create = mutation({
  args: { projectId: v.id("projects"), title: v.string() },
  handler: async (ctx, args) => null,
});
"""

ISSUES_VALIDATORS = """\
import { v } from "convex/values";

export const listValidator = v.object({ status: v.string() });
"""

SCHEMA = """\
import { defineSchema, defineTable } from "convex/server";
import { v } from "convex/values";

const users = defineTable({ name: v.string() });
const postsTable = defineTable({ title: v.string() });

export default defineSchema({ users, posts: postsTable });
"""


def _write_files(root: Path, files: dict[str, str]) -> None:
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture
def write_files() -> WriteFiles:
    """Write {relative_path: content} under a root directory."""
    return _write_files


@pytest.fixture(scope="session")
def ts_parser() -> TypeScriptParser:
    """Shared tree-sitter TypeScript parser."""
    return TypeScriptParser()


@pytest.fixture
def convex_project(tmp_path: Path) -> Path:
    """A project root with a Convex backend and a config file."""
    backend = tmp_path / "packages" / "backend"
    _write_files(
        backend,
        {
            "issues/queries.ts": ISSUES_QUERIES,
            "issues/mutations.ts": ISSUES_MUTATIONS,
            "model/issues/validators.ts": ISSUES_VALIDATORS,
            "schema.ts": SCHEMA,
            "crons.ts": "export default {};\n",
            "_generated/api.d.ts": "export declare const api: any;\n",
        },
    )
    (tmp_path / ".convex-gen.json").write_text(
        '{\n  "org": "@acme",\n  "convex": {"path": "packages/backend"},\n'
        '  "dataLayer": {"path": "packages/data-layer/src"}\n}\n'
    )
    return tmp_path

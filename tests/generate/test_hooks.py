"""Tests for generate/hooks.py module.

Covers:
- Parameter list synthesis
- Skip-sentinel argument expressions
- Paginated, opaque, mutation and action bodies
- Order-independent collision renaming in grouped files
- HooksGenerator file layout
"""

from __future__ import annotations

from pathlib import Path

import pytest

from convexgen.generate.hooks import (
    HooksGenerator,
    grouped_hook_names,
    render_body,
    render_grouped_file,
    render_hook,
    render_imports,
    render_params,
)
from convexgen.parse.models import (
    ArgumentClass,
    ArgumentDescriptor,
    FunctionDescriptor,
    FunctionKind,
)

API = "@acme/backend/api"
DATA_MODEL = "@acme/backend/dataModel"


def _id(name: str, table: str, *, optional: bool = False) -> ArgumentDescriptor:
    return ArgumentDescriptor(
        name=name,
        type=f'Id<"{table}">',
        optional=optional,
        classification=ArgumentClass.OPTIONAL_ID if optional else ArgumentClass.ID,
        is_reference_id=True,
        referenced_table=table,
    )


def _prim(name: str, type_: str = "string", *, optional: bool = False) -> ArgumentDescriptor:
    return ArgumentDescriptor(
        name=name,
        type=type_,
        optional=optional,
        classification=(
            ArgumentClass.OPTIONAL_PRIMITIVE if optional else ArgumentClass.PRIMITIVE
        ),
    )


def _fn(
    name: str,
    namespace: str = "issues/queries",
    kind: FunctionKind = FunctionKind.QUERY,
    *args: ArgumentDescriptor,
    paginated: bool = False,
    opaque: bool = False,
) -> FunctionDescriptor:
    return FunctionDescriptor(
        name=name,
        kind=kind,
        namespace=namespace,
        source_file=Path(f"/convex/{namespace}.ts"),
        arguments=list(args),
        is_paginated=paginated,
        uses_opaque_args=opaque,
    )


class TestQueryHooks:
    """Query wrappers."""

    def test_given_required_id_when_rendered_then_gated_on_id(self) -> None:
        """listIssues(projectId) passes the skip sentinel until projectId is set."""
        # Given
        fn = _fn("listIssues", "issues/queries", FunctionKind.QUERY, _id("projectId", "projects"))

        # When
        params = render_params(fn)
        body = render_body(fn)

        # Then
        assert params == 'projectId: Id<"projects"> | null | undefined'
        assert body == (
            "  return useQuery(api.issues.queries.listIssues, "
            'projectId ? { projectId } as any : "skip");\n'
        )

    def test_multiple_ids_and_optionals(self) -> None:
        """All required IDs gate the call; optionals are spread only when set."""
        fn = _fn(
            "search",
            "issues/queries",
            FunctionKind.QUERY,
            _prim("q", optional=True),
            _id("projectId", "projects"),
            _id("assigneeId", "users", optional=True),
            _id("orgId", "orgs"),
        )

        assert render_params(fn) == (
            'projectId: Id<"projects"> | null | undefined, '
            'orgId: Id<"orgs"> | null | undefined, '
            "q?: string | null, "
            'assigneeId?: Id<"users"> | null'
        )
        assert render_body(fn) == (
            "  return useQuery(api.issues.queries.search, projectId && orgId ? "
            "{ projectId, orgId, ...(q !== null && q !== undefined ? { q } : {}), "
            "...(assigneeId !== null && assigneeId !== undefined ? { assigneeId } : {}) }"
            ' as any : "skip");\n'
        )

    def test_no_required_ids_uses_should_skip(self) -> None:
        fn = _fn("byStatus", "issues/queries", FunctionKind.QUERY, _prim("status"))

        assert render_params(fn) == "status: string, shouldSkip?: boolean"
        assert render_body(fn) == (
            "  return useQuery(api.issues.queries.byStatus, "
            'shouldSkip ? "skip" : { status } as any) as any;\n'
        )

    def test_no_arguments(self) -> None:
        fn = _fn("all")

        assert render_params(fn) == "shouldSkip?: boolean"
        assert 'shouldSkip ? "skip" : {} as any' in render_body(fn)

    def test_paginated_query(self) -> None:
        """Paginated queries take options and never take shouldSkip."""
        fn = _fn(
            "feed",
            "issues/queries",
            FunctionKind.QUERY,
            _prim("label", optional=True),
            paginated=True,
        )

        assert render_params(fn) == (
            "label?: string | null, options?: { initialNumItems?: number }"
        )
        assert render_body(fn) == (
            "  return usePaginatedQuery(\n"
            "    api.issues.queries.feed,\n"
            "    { ...(label !== null && label !== undefined ? { label } : {}) },\n"
            "    { initialNumItems: options?.initialNumItems || 20 }\n"
            "  );\n"
        )

    def test_paginated_query_with_required_id(self) -> None:
        fn = _fn(
            "comments",
            "issues/queries",
            FunctionKind.QUERY,
            _id("issueId", "issues"),
            paginated=True,
        )

        assert '    issueId ? { issueId } as any : "skip",\n' in render_body(fn)

    def test_opaque_args_pass_through(self) -> None:
        """Opaque functions take the endpoint's own argument type."""
        fn = _fn("filter", "issues/queries", FunctionKind.QUERY, _prim("x"), opaque=True)

        assert render_params(fn) == "args: FunctionArgs<typeof api.issues.queries.filter> | null"
        assert render_body(fn) == (
            '  return useQuery(api.issues.queries.filter, args ?? "skip");\n'
        )

    def test_id_array_params(self) -> None:
        tags = ArgumentDescriptor(
            name="tagIds",
            type='Id<"tags">[]',
            optional=False,
            classification=ArgumentClass.ID_ARRAY,
            is_reference_id_array=True,
            referenced_table="tags",
        )
        fn = _fn("byTags", "issues/queries", FunctionKind.QUERY, tags)

        assert render_params(fn) == 'tagIds: Id<"tags">[] | null | undefined'
        assert "tagIds ? { tagIds } as any" in render_body(fn)


class TestMutationAndActionHooks:
    """One-line wrappers."""

    @pytest.mark.parametrize(
        ("kind", "react_hook"),
        [(FunctionKind.MUTATION, "useMutation"), (FunctionKind.ACTION, "useAction")],
    )
    def test_one_line_wrapper(self, kind: FunctionKind, react_hook: str) -> None:
        fn = _fn("create", "issues/mutations", kind, _id("projectId", "projects"))

        hook = render_hook(fn, "useIssuesCreate")

        assert "export function useIssuesCreate() {\n" in hook
        assert f"  return {react_hook}(api.issues.mutations.create);\n" in hook
        assert "@param" not in hook


class TestJsdoc:
    def test_query_docs(self) -> None:
        fn = _fn(
            "listIssues",
            "issues/queries",
            FunctionKind.QUERY,
            _id("projectId", "projects"),
            _prim("limit", "number", optional=True),
        )

        hook = render_hook(fn, "useIssuesListIssues")

        assert hook.startswith("/**\n * Hook to list issues\n *\n")
        assert " * @param projectId - ID of projects\n" in hook
        assert " * @param limit - number value (optional)\n" in hook
        assert "shouldSkip" not in hook


class TestImports:
    def test_query_imports(self) -> None:
        functions = [
            _fn("a", "x", FunctionKind.QUERY, _id("id", "users")),
            _fn("b", "x", FunctionKind.QUERY, paginated=True),
            _fn("c", "x", FunctionKind.QUERY, opaque=True),
        ]

        imports = render_imports(FunctionKind.QUERY, functions, API, DATA_MODEL)

        assert imports == (
            'import { useQuery, usePaginatedQuery } from "convex/react";\n'
            f'import {{ api }} from "{API}";\n'
            f'import type {{ Id }} from "{DATA_MODEL}";\n'
            'import type { FunctionArgs } from "convex/server";\n\n'
        )

    def test_mutation_imports(self) -> None:
        imports = render_imports(FunctionKind.MUTATION, [_fn("a")], API, DATA_MODEL)

        assert imports == (
            'import { useMutation } from "convex/react";\n'
            f'import {{ api }} from "{API}";\n\n'
        )


class TestCollisions:
    """Two-pass renaming inside a grouped file."""

    def test_given_sibling_gets_when_named_then_both_qualified_in_any_order(self) -> None:
        """a/x.get and a/y.get become useAXGet and useAYGet regardless of order."""
        # Given
        x_get = _fn("get", "a/x")
        y_get = _fn("get", "a/y")
        other = _fn("list", "a/x")

        # When
        forward = dict(zip(["x", "y", "l"], grouped_hook_names("a", [x_get, y_get, other])))
        backward = dict(zip(["l", "y", "x"], grouped_hook_names("a", [other, y_get, x_get])))

        # Then
        assert forward == backward == {"x": "useAXGet", "y": "useAYGet", "l": "useAList"}

    def test_grouped_file_sections(self) -> None:
        functions = [_fn("get", "a/y"), _fn("get", "a/x"), _fn("top", "a")]

        content = render_grouped_file("a", FunctionKind.QUERY, functions, API, DATA_MODEL)

        x_section = content.index("// ============= X QUERIES =============")
        y_section = content.index("// ============= Y QUERIES =============")
        top_section = content.index("// ============= A QUERIES =============")
        assert top_section < x_section < y_section
        assert content.index("export function useAXGet(") > x_section
        assert content.index("export function useAYGet(") > y_section
        assert "export function useATop(" in content


class TestHooksGenerator:
    """File layout on disk."""

    def _functions(self) -> list[FunctionDescriptor]:
        return [
            _fn("listIssues", "issues/queries", FunctionKind.QUERY, _id("projectId", "projects")),
            _fn("create", "issues/mutations", FunctionKind.MUTATION),
            _fn("list", "projects", FunctionKind.QUERY),
        ]

    def test_grouped_layout(self, tmp_path: Path) -> None:
        generator = HooksGenerator(tmp_path, api_import=API, data_model_import=DATA_MODEL)

        written = generator.generate(self._functions())

        assert sorted(p.relative_to(tmp_path).as_posix() for p in written) == [
            "actions/index.ts",
            "mutations/index.ts",
            "mutations/useIssues.ts",
            "queries/index.ts",
            "queries/useIssues.ts",
            "queries/useProjects.ts",
        ]
        assert (tmp_path / "queries" / "index.ts").read_text().endswith(
            "export * from './useIssues';\nexport * from './useProjects';\n"
        )
        assert "No files generated" in (tmp_path / "actions" / "index.ts").read_text()

    def test_split_layout(self, tmp_path: Path) -> None:
        generator = HooksGenerator(
            tmp_path, api_import=API, data_model_import=DATA_MODEL, file_structure="split"
        )

        generator.generate(self._functions())

        assert sorted(p.name for p in (tmp_path / "queries").iterdir()) == [
            "index.ts",
            "useIssues_queries.ts",
            "useProjects.ts",
        ]
        content = (tmp_path / "queries" / "useIssues_queries.ts").read_text()
        assert "export function useIssuesQueriesListIssues(" in content

    def test_both_layout_deduplicates_names(self, tmp_path: Path) -> None:
        """useProjects is produced by both layouts but written and exported once."""
        generator = HooksGenerator(
            tmp_path, api_import=API, data_model_import=DATA_MODEL, file_structure="both"
        )

        generator.generate(self._functions())

        index = (tmp_path / "queries" / "index.ts").read_text()
        assert index.count("export * from './useProjects';") == 1
        assert "export * from './useIssues';" in index
        assert "export * from './useIssues_queries';" in index

    def test_stale_files_removed(self, tmp_path: Path) -> None:
        (tmp_path / "queries").mkdir(parents=True)
        (tmp_path / "queries" / "useGone.ts").write_text("stale")
        generator = HooksGenerator(tmp_path, api_import=API, data_model_import=DATA_MODEL)

        generator.generate(self._functions())

        assert not (tmp_path / "queries" / "useGone.ts").exists()

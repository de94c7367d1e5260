"""Tests for the SpecsContext engine."""

from speccontext import DocumentClass, SpecContextConfig, SpecsContext, create_context
from speccontext.diff import NO_CHANGES


def test_build_context_loads_lazily(specs_context):
    assert not specs_context.loaded
    bundle = specs_context.build_context("logging")
    assert specs_context.loaded

    assert [e.path for e in bundle.specs] == [
        "src/lib/logging.spec",
        "src/lib/audit.spec",
        "src/lib/quicksum-core.spec",
    ]
    assert [e.path for e in bundle.design_specs] == ["src/lib/logging.format.ds"]
    assert [e.path for e in bundle.requirements] == ["R#001-logging.req"]


def test_build_context_with_hint_and_limit(specs_context):
    bundle = specs_context.build_context(
        "quicksum logging",
        hint_files=["src/cli/quicksum.js.spec"],
        limit=3,
    )
    assert "src/cli/quicksum.js.spec" in [e.path for e in bundle.specs]
    assert len(bundle.specs) == 3


def test_build_context_is_deterministic(specs_context):
    first = specs_context.build_context("logging export", hint_files=["R#002-export.req"])
    second = specs_context.build_context("logging export", hint_files=["R#002-export.req"])
    assert first == second


def test_reload_one_picks_up_changes(specs_context, store):
    specs_context.refresh()
    store.write_document(DocumentClass.SPEC, "src/lib/other.spec", "## Purpose\nzebra crossing")

    assert specs_context.build_context("zebra").specs == []
    specs_context.reload_one(DocumentClass.SPEC, "src/lib/other.spec")
    assert [e.path for e in specs_context.build_context("zebra").specs] == ["src/lib/other.spec"]


def test_reload_one_adds_new_document(specs_context, store):
    specs_context.refresh()
    store.write_document(DocumentClass.REQUIREMENT, "R#003-zebra.req", "zebra")
    specs_context.reload_one("requirement", "R#003-zebra.req")
    assert [e.path for e in specs_context.build_context("zebra").requirements] == ["R#003-zebra.req"]


def test_reload_one_forgets_deleted_document(specs_context, store):
    specs_context.refresh()
    store.delete_document(DocumentClass.SPEC, "src/lib/audit.spec")
    specs_context.reload_one(DocumentClass.SPEC, "src/lib/audit.spec")

    assert "src/lib/audit.spec" not in specs_context.indices[DocumentClass.SPEC]
    assert "src/lib/audit.spec" not in [e.path for e in specs_context.build_context("audit").specs]


def test_reload_one_before_load_does_full_refresh(specs_context):
    specs_context.reload_one(DocumentClass.SPEC, "src/lib/audit.spec")
    assert specs_context.loaded
    assert len(specs_context.indices[DocumentClass.SPEC]) == 5


def test_invalidate_all_repopulates_on_next_query(specs_context, store):
    specs_context.refresh()
    store.write_document(DocumentClass.SPEC, "src/lib/zebra.spec", "zebra")

    specs_context.invalidate_all()
    assert not specs_context.loaded
    assert len(specs_context.indices[DocumentClass.SPEC]) == 0

    assert [e.path for e in specs_context.build_context("zebra").specs] == ["src/lib/zebra.spec"]


def test_refresh_drops_removed_documents(specs_context, store):
    specs_context.refresh()
    store.delete_document(DocumentClass.SPEC, "src/lib/logging.spec")
    specs_context.refresh()
    assert "src/lib/logging.spec" not in specs_context.indices[DocumentClass.SPEC]


def test_remove_one_unknown_path_is_noop(specs_context):
    specs_context.refresh()
    specs_context.remove_one(DocumentClass.SPEC, "nope.spec")
    assert len(specs_context.indices[DocumentClass.SPEC]) == 5


def test_preview_update(specs_context):
    report = specs_context.preview_change(
        DocumentClass.SPEC, "src/lib/audit.spec", "## Purpose\nlogging audit trail\nretention"
    )
    assert report == (
        "Updating spec file 'src/lib/audit.spec'\n"
        "Chapter: Purpose\n"
        "  logging audit trail\n"
        "+ retention"
    )


def test_preview_update_of_missing_document_diffs_against_empty(specs_context):
    report = specs_context.preview_change(DocumentClass.SPEC, "src/lib/new.spec", "## A\nx")
    assert report == "Updating spec file 'src/lib/new.spec'\nChapter: A\n- \n+ x"


def test_preview_create_and_delete(specs_context):
    create = specs_context.preview_change(DocumentClass.DESIGN_SPEC, "a.ds", "", action="create")
    assert create == f"Creating new design spec file 'a.ds'\n{NO_CHANGES}"
    assert specs_context.preview_change(DocumentClass.SPEC, "a.spec", None, action="delete") == (
        "Deleting spec file 'a.spec'"
    )


def test_render_diff_uses_config_color(store):
    colored = SpecsContext(store, SpecContextConfig(color=True))
    assert "\033[" in colored.render_diff("## A\nx", "## A\ny")
    assert "\033[" not in colored.render_diff("## A\nx", "## A\ny", color=False)


def test_get_stats(specs_context):
    specs_context.refresh()
    stats = specs_context.get_stats()
    assert stats["loaded"] is True
    assert stats["indices"]["spec"]["documents"] == 5
    assert stats["indices"]["requirement"]["documents"] == 2


def test_create_context_over_workspace(workspace, monkeypatch):
    monkeypatch.delenv("SPECCONTEXT_WORKSPACE_DIR", raising=False)
    ctx = create_context(str(workspace), color=False)
    bundle = ctx.build_context("sum numbers", hint_files=["src/cli/quicksum.js.spec"])

    assert [e.path for e in bundle.specs] == ["src/cli/quicksum.js.spec"]
    assert bundle.requirements[0].path == "R#001-sum.req"


def test_refresh_indexes_documents_under_nested_specs_dir(workspace):
    nested = workspace / "specs" / "specs"
    nested.mkdir()
    (nested / "api.spec").write_text("zebra nested content", encoding="utf-8")

    ctx = create_context(str(workspace), color=False)
    bundle = ctx.build_context("zebra")
    assert [e.path for e in bundle.specs] == ["specs/api.spec"]
    assert ctx.documents[DocumentClass.SPEC]["specs/api.spec"] == "zebra nested content"

    (nested / "api.spec").write_text("zebra okapi", encoding="utf-8")
    ctx.reload_one(DocumentClass.SPEC, "specs/specs/api.spec")
    assert ctx.documents[DocumentClass.SPEC]["specs/api.spec"] == "zebra okapi"

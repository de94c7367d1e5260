"""Pytest configuration and fixtures."""

import pytest

from speccontext import DocumentClass, InMemoryContextStore, SpecContextConfig, SpecsContext


@pytest.fixture
def corpus():
    """A small workspace: specs, design specs and requirements."""
    return {
        DocumentClass.SPEC: {
            "src/cli/quicksum.js.spec": "## Purpose\nCommand line entry point.",
            "src/lib/quicksum-core.spec": "## Purpose\nquicksum logging core",
            "src/lib/logging.spec": "## Purpose\nlogging setup and logging levels",
            "src/lib/audit.spec": "## Purpose\nlogging audit trail",
            "src/lib/other.spec": "## Purpose\nunrelated helpers",
        },
        DocumentClass.DESIGN_SPEC: {
            "src/lib/logging.format.ds": "## Format\nlogging lines are JSON",
        },
        DocumentClass.REQUIREMENT: {
            "R#001-logging.req": "The system must support logging",
            "R#002-export.req": "Users can export reports.",
        },
    }


@pytest.fixture
def store(corpus):
    return InMemoryContextStore(corpus)


@pytest.fixture
def specs_context(store):
    return SpecsContext(store, SpecContextConfig(color=False))


@pytest.fixture
def workspace(tmp_path):
    """A filesystem workspace with the standard specs/ layout."""
    specs = tmp_path / "specs"
    (specs / "src" / "cli").mkdir(parents=True)
    (specs / "reqs").mkdir()
    (specs / "src" / "cli" / "quicksum.js.spec").write_text("## Purpose\nSum numbers.\n", encoding="utf-8")
    (specs / "src" / "cli" / "quicksum.js.args.ds").write_text("## Args\n--precision\n", encoding="utf-8")
    (specs / "src" / "cli" / "other.js.ds").write_text("## Args\nnone\n", encoding="utf-8")
    (specs / "vision.md").write_text("Make summing fast.", encoding="utf-8")
    (specs / "reqs" / "R#001-sum.req").write_text("Sum a list of numbers.", encoding="utf-8")
    (specs / "reqs" / "R#004-log.req").write_text("Log every run.", encoding="utf-8")
    (specs / "reqs" / "stray.spec").write_text("not a spec", encoding="utf-8")
    return tmp_path

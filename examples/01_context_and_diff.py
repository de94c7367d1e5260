#!/usr/bin/env python3
"""
Example 1: Ranked Context and Change Preview

This example demonstrates:
- Creating a SpecsContext over an in-memory store
- Ranking specs, design specs and requirements for a query
- Boosting a known file with hint paths
- Reloading one document after it changes
- Previewing a generated change as a chapter diff

Requirements:
    pip install speccontext
"""

from speccontext import (
    DocumentClass,
    InMemoryContextStore,
    SpecContextConfig,
    SpecsContext,
)


def main():
    print("=" * 60)
    print("Example 1: Ranked Context and Change Preview")
    print("=" * 60)

    # ============================================================
    # Step 1: Build a store and a context
    # ============================================================
    print("\n📦 Creating context...")

    store = InMemoryContextStore({
        DocumentClass.SPEC: {
            "src/cli/quicksum.js.spec": "## Purpose\nCommand line entry point.\n\n## Scope\n- ALL",
            "src/lib/quicksum-core.spec": "## Purpose\nquicksum logging core",
            "src/lib/logging.spec": "## Purpose\nlogging setup and logging levels",
        },
        DocumentClass.DESIGN_SPEC: {
            "src/lib/logging.format.ds": "## Format\nlogging lines are JSON",
        },
        DocumentClass.REQUIREMENT: {
            "R#001-logging.req": "The system must support logging",
        },
    })
    ctx = SpecsContext(store, SpecContextConfig(color=True))

    # ============================================================
    # Step 2: Rank context for a query
    # ============================================================
    print("\n🔍 Context for 'quicksum logging'")
    bundle = ctx.build_context(
        "quicksum logging",
        hint_files=["src/cli/quicksum.js.spec"],
        limit=3,
    )

    for title, entries in (
        ("Specs", bundle.specs),
        ("Design specs", bundle.design_specs),
        ("Requirements", bundle.requirements),
    ):
        print(f"   {title}:")
        for i, entry in enumerate(entries, 1):
            print(f"   {i}. [{entry.score}] {entry.path}")

    # ============================================================
    # Step 3: Preview a generated change, then persist and reload
    # ============================================================
    path = "src/cli/quicksum.js.spec"
    new_content = "## Purpose\nCommand line entry point.\n\n## Scope\n- ALL\n- Extra"

    print("\n📝 Proposed change:")
    print(ctx.preview_change(DocumentClass.SPEC, path, new_content))

    store.write_document(DocumentClass.SPEC, path, new_content)
    ctx.reload_one(DocumentClass.SPEC, path)

    print("\n📊 Index statistics:")
    for doc_class, stats in ctx.get_stats()["indices"].items():
        print(f"   - {doc_class}: {stats['documents']} docs, {stats['tokens']} tokens")

    print("\n✅ Example complete!")


if __name__ == "__main__":
    main()

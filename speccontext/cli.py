"""CLI for the speccontext engine."""

import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import DocumentNotFound
from .loaders import load_text


def _read_or_empty(path: str) -> str:
    """Missing files diff as empty text (a 'create')."""
    try:
        return load_text(path)
    except DocumentNotFound:
        return ""


def context(args: argparse.Namespace) -> None:
    """Rank documents for a query."""
    from .context import create_context

    ctx = create_context(args.workspace, color=False)
    bundle = ctx.build_context(args.query, hint_files=args.hint, limit=args.limit)

    if args.json:
        print(json.dumps(bundle.to_dict(), indent=2))
        return

    for title, entries in (
        ("Specs", bundle.specs),
        ("Design specs", bundle.design_specs),
        ("Requirements", bundle.requirements),
    ):
        print(f"=== {title} ===")
        if not entries:
            print("  (none)")
        for i, entry in enumerate(entries, 1):
            print(f"{i}. [{entry.score}] {entry.path}")
        print()


def diff(args: argparse.Namespace) -> None:
    """Show a chapter diff between two markdown files."""
    from .diff import render_diff

    old_text = _read_or_empty(args.old)
    new_text = _read_or_empty(args.new)
    color = not args.no_color and sys.stdout.isatty()
    print(render_diff(old_text, new_text, color=color))


def serve(args: argparse.Namespace) -> None:
    """Start the REST API server."""
    try:
        import uvicorn
        from .api import create_app
    except ImportError:
        print("Error: API dependencies not installed.")
        print("  Run: pip install 'speccontext[api]'")
        sys.exit(1)

    app = create_app(workspace_dir=args.workspace)

    print(f"Starting speccontext API server on http://{args.host}:{args.port}")
    print(f"  Workspace: {Path(args.workspace or '.').resolve()}")
    print(f"  Docs: http://{args.host}:{args.port}/docs\n")

    uvicorn.run(app, host=args.host, port=args.port)


def stats(args: argparse.Namespace) -> None:
    """Show index statistics."""
    from .context import create_context

    ctx = create_context(args.workspace)
    ctx.refresh()
    print(json.dumps(ctx.get_stats(), indent=2))


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="speccontext",
        description="speccontext - Specification context ranking and chapter diffs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  speccontext context "quicksum logging" --hint src/cli/quicksum.js.spec
  speccontext diff old.md new.md
  speccontext stats
  speccontext serve

Environment variables:
  SPECCONTEXT_WORKSPACE_DIR   Workspace holding the specs/ directory
"""
    )

    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--workspace", type=str, help="Workspace directory (default: current directory)"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log ranking details"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Context command
    context_parser = subparsers.add_parser("context", help="Rank documents for a query")
    context_parser.add_argument("query", type=str, help="Free-text query")
    context_parser.add_argument(
        "--hint", action="append", default=[], help="Path to boost (repeatable)"
    )
    context_parser.add_argument(
        "--limit", type=int, default=None, help="Results per document class (default: 5)"
    )
    context_parser.add_argument(
        "--json", action="store_true", help="Print JSON instead of a listing"
    )
    context_parser.set_defaults(func=context)

    # Diff command
    diff_parser = subparsers.add_parser("diff", help="Chapter diff of two markdown files")
    diff_parser.add_argument("old", type=str, help="Previous file (missing means empty)")
    diff_parser.add_argument("new", type=str, help="New file")
    diff_parser.add_argument(
        "--no-color", action="store_true", help="Disable ANSI colors"
    )
    diff_parser.set_defaults(func=diff)

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start REST API server")
    serve_parser.add_argument(
        "--host", type=str, default="127.0.0.1", help="Host to bind (default: 127.0.0.1)"
    )
    serve_parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind (default: 8000)"
    )
    serve_parser.set_defaults(func=serve)

    # Stats command
    stats_parser = subparsers.add_parser("stats", help="Show index statistics")
    stats_parser.set_defaults(func=stats)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()

"""CLI entrypoints for madeindex commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict

from .config import ConfigError, MadeIndexConfig, load_config
from .errors import ComponentNotFoundError, MadeIndexError
from .logging import configure_logging
from .server import IndexServer


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_json_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw JSON response instead of a summary.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="madeindex",
        description="Index a design system's tokens and stories and query them offline.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .madeindex.yml or the directory containing it (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Build indexes from a design-system checkout.")
    _add_verbose_option(build_parser, suppress_default=True)
    build_parser.add_argument(
        "repo",
        nargs="?",
        default=None,
        help="Path to the design-system repository (defaults to repo_path from the config).",
    )
    build_parser.add_argument("--ref", default="main", help="Upstream ref label recorded in the index metadata.")
    build_parser.add_argument("--commit", default="unknown", help="Upstream commit label recorded in the index metadata.")

    status_parser = subparsers.add_parser("status", help="Report index health and freshness.")
    _add_verbose_option(status_parser, suppress_default=True)
    _add_json_option(status_parser)

    search_parser = subparsers.add_parser("search", help="Search component examples.")
    _add_verbose_option(search_parser, suppress_default=True)
    _add_json_option(search_parser)
    search_parser.add_argument("query", help="Free-text query.")
    search_parser.add_argument("--limit", type=int, default=10, help="Maximum results to print.")

    scaffold_parser = subparsers.add_parser("scaffold", help="Generate customised markup for a component.")
    _add_verbose_option(scaffold_parser, suppress_default=True)
    _add_json_option(scaffold_parser)
    scaffold_parser.add_argument("name", help="Component name (case-insensitive).")
    scaffold_parser.add_argument(
        "--prop",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Property override; repeat for several props.",
    )

    lint_parser = subparsers.add_parser("lint", help="Lint a markup file against the design system.")
    _add_verbose_option(lint_parser, suppress_default=True)
    _add_json_option(lint_parser)
    lint_parser.add_argument("path", help="Markup file to lint, or '-' to read stdin.")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP service.")
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Bind address (defaults to the config value).")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (defaults to the config value).")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for madeindex commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    configure_logging(
        verbose=bool(args.verbose) or config.logging.verbose,
        log_file=config.logging.log_file,
    )

    if args.command == "serve":
        from .service import run_service

        run_service(
            config,
            host=args.host or config.service.host,
            port=args.port or config.service.port,
        )
        return

    server = IndexServer.from_config(config)
    try:
        if args.command == "build":
            _run_build(server, config, args)
            return
        server.initialize()
        if args.command == "status":
            _run_status(server, args)
        elif args.command == "search":
            _run_search(server, args)
        elif args.command == "scaffold":
            _run_scaffold(server, parser, args)
        elif args.command == "lint":
            _run_lint(server, args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except ComponentNotFoundError as exc:
        parser.exit(1, f"{exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except MadeIndexError as exc:
        parser.exit(1, f"madeindex {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_build(server: IndexServer, config: MadeIndexConfig, args: argparse.Namespace) -> None:
    repo = Path(args.repo) if args.repo else config.repo_path
    meta = server.build_indexes(repo, ref=args.ref, commit=args.commit)
    print(
        f"Indexed {meta['tokensCount']} tokens and {meta['componentsCount']} components "
        f"from {repo} ({meta['upstreamRef']}@{meta['upstreamCommit']})"
    )


def _run_status(server: IndexServer, args: argparse.Namespace) -> None:
    health = server.health_check()
    if args.json:
        _print_json(health)
        return
    print(f"Status: {health['status']} (version {health['version']})")
    print(f"Last build: {health['lastSync'] or 'never'}")
    if health["stale"]:
        print("Indexes are stale; run `madeindex build` to refresh them.")
    for check in health["checks"]:
        message = f" - {check['message']}" if check.get("message") else ""
        print(f"  [{check['status']}] {check['name']}{message}")


def _run_search(server: IndexServer, args: argparse.Namespace) -> None:
    response = server.search_examples(args.query)
    if args.json:
        _print_json(response)
        return
    results = response["results"][: max(args.limit, 0)]
    if not results:
        print(f"No results for {args.query!r}")
        return
    for result in results:
        print(f"{result['title']}  [{result['sourcePath']}]")


def _run_scaffold(server: IndexServer, parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    props: Dict[str, Any] = {}
    for item in args.prop:
        key, separator, value = item.partition("=")
        if not separator or not key:
            parser.error(f"--prop expects KEY=VALUE, got {item!r}")
        props[key] = _parse_prop_value(value)
    response = server.scaffold_component(args.name, props)
    if args.json:
        _print_json(response)
        return
    print(response["html"])
    for note in response["notes"]:
        print(f"# {note}")
    if response["dependencies"]:
        print("# Dependencies:")
        for dependency in response["dependencies"]:
            print(f"#   {dependency}")


def _run_lint(server: IndexServer, args: argparse.Namespace) -> None:
    if args.path == "-":
        html = sys.stdin.read()
    else:
        html = Path(args.path).read_text(encoding="utf-8")
    response = server.lint_markup(html)
    if args.json:
        _print_json(response)
    else:
        for issue in response["issues"]:
            location = f"{issue['line']}:{issue.get('column', 0)} " if "line" in issue else ""
            print(f"{issue['type']}: {location}{issue['message']}")
        for suggestion in response["suggestions"]:
            print(f"hint: {suggestion}")
        print("Markup is valid" if response["valid"] else "Markup has errors")
    if not response["valid"]:
        raise SystemExit(1)


def _parse_prop_value(raw: str) -> Any:
    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for cast in (int, float):
        try:
            return cast(raw)
        except ValueError:
            continue
    return raw


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main(sys.argv[1:])

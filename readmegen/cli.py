"""CLI entrypoints for readmegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ReadmeGenConfig, load_config
from .errors import ReadmeGenError
from .github.client import GitHubClient
from .logging import configure_logging
from .orchestrator import Orchestrator
from .progress import LoggingSink
from .url_parser import parse_repo_url


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to readmegen.yml or its directory (defaults to the current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="readmegen",
        description="Generate README files for GitHub repositories using source analysis.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug logs, tagged with the run id, to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Analyze a repository and generate its README.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument(
        "repo",
        help="GitHub URL or owner/repo shorthand.",
    )
    generate_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Write the README to this file instead of stdout.",
    )
    generate_parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Override how many directory levels below the root are crawled.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service with streamed progress.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default=None, help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=None, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for readmegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config or Path.cwd())
    except ReadmeGenError as exc:
        parser.exit(1, f"readmegen: {exc}\n")

    if args.command == "generate":
        _generate(parser, args, config)
    elif args.command == "serve":
        from .service.app import run_service

        run_service(args.host, args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _generate(
    parser: argparse.ArgumentParser, args: argparse.Namespace, config: ReadmeGenConfig
) -> None:
    if args.max_depth is not None:
        config.github.max_depth = args.max_depth
    client = GitHubClient.from_config(config.github)
    try:
        ref = parse_repo_url(args.repo)
        metadata = client.get_repository(ref)
        orchestrator = Orchestrator.from_config(config, host=client)
        document = orchestrator.run(ref, metadata, sink=LoggingSink())
    except ReadmeGenError as exc:
        hint = ""
        if exc.auth_may_help and not config.github.token:
            hint = " Set GITHUB_TOKEN to access private repositories or raise the rate limit."
        parser.exit(1, f"readmegen generate failed: {exc}.{hint}\n")

    if args.output is None:
        sys.stdout.write(document.markdown_text.rstrip() + "\n")
        return
    args.output.write_text(document.markdown_text.rstrip() + "\n", encoding="utf-8")
    print(f"README written to {_relativize(args.output)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])

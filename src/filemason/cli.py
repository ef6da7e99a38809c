"""Command line front end.

    filemason [-q|-v|-d] [--config FILE] <command> ...

Commands:
    propose  Print a conflict-free path for a file or directory
    copy     Copy a file or a directory tree
    move     Move a file or a directory tree
    pack     Zip files and directories into one archive
    unpack   Extract an archive into a directory
    hash     Print a file checksum
    config   Print every resolved configuration value and its source
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

from filemason import __version__
from filemason.core.config import ConfigResolver
from filemason.core.diagnostics import install_jsonl_sink
from filemason.core.errors import FileMasonError
from filemason.core.logging import apply_logging_policy, get_logger, set_log_stream
from filemason.file_io import CompressionLevel, FileManager, HashAlgorithm

log = get_logger("filemason.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="filemason", description=__doc__.splitlines()[0])
    parser.add_argument("--version", action="version", version=f"filemason {__version__}")

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Errors only")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Detailed output")
    verbosity.add_argument("-d", "--debug", action="store_true", help="Everything")

    parser.add_argument("--config", type=Path, help="User config file (YAML)")
    parser.add_argument("--max-depth", type=int, help="Directory depth limit for tree copies")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("propose", help="Print a conflict-free path")
    p.add_argument("path", type=Path, help="Desired path")
    p.add_argument("--dir", action="store_true", help="Propose a directory path")

    for name in ("copy", "move"):
        p = sub.add_parser(name, help=f"{name.capitalize()} a file or directory")
        p.add_argument("source", type=Path)
        p.add_argument("dest", type=Path)
        p.add_argument("--overwrite", action="store_true", help="Replace existing entries")

    p = sub.add_parser("pack", help="Create a zip archive")
    p.add_argument("archive", type=Path)
    p.add_argument("sources", type=Path, nargs="+")
    p.add_argument("--overwrite", action="store_true", help="Replace an existing archive")
    p.add_argument(
        "--compression",
        choices=[c.value for c in CompressionLevel],
        help="Compression preset",
    )

    p = sub.add_parser("unpack", help="Extract a zip archive")
    p.add_argument("archive", type=Path)
    p.add_argument("dest", type=Path)
    p.add_argument("--overwrite", action="store_true", help="Replace existing files")

    p = sub.add_parser("hash", help="Print a file checksum")
    p.add_argument("path", type=Path)
    p.add_argument(
        "--algo",
        choices=[a.value for a in HashAlgorithm],
        default=HashAlgorithm.SHA256.value,
    )

    sub.add_parser("config", help="Show resolved configuration")
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Translate parsed options into nested config overrides."""
    cli_args: dict[str, Any] = {}
    if args.quiet:
        cli_args.setdefault("logging", {})["level"] = "quiet"
    elif args.verbose:
        cli_args.setdefault("logging", {})["level"] = "verbose"
    elif args.debug:
        cli_args.setdefault("logging", {})["level"] = "debug"

    file_io: dict[str, Any] = {}
    if args.max_depth is not None:
        file_io["tree"] = {"max_depth": args.max_depth}
    if getattr(args, "compression", None):
        file_io["archives"] = {"compression": args.compression}
    if file_io:
        cli_args["file_io"] = file_io
    return cli_args


def _run(args: argparse.Namespace, resolver: ConfigResolver) -> None:
    if args.command == "config":
        for key, src in resolver.resolve_all().items():
            print(f"{key} = {src.value!r}  ({src.source})")
        return

    manager = FileManager.from_resolver(resolver)

    if args.command == "propose":
        if args.dir:
            print(manager.propose_directory_path(args.path))
        else:
            print(manager.propose_file_path(args.path))
    elif args.command in ("copy", "move"):
        if args.source.is_dir():
            op = manager.copy_directory if args.command == "copy" else manager.move_directory
        else:
            op = manager.copy_file if args.command == "copy" else manager.move_file
        print(op(args.source, args.dest, overwrite=args.overwrite).path)
    elif args.command == "pack":
        print(manager.create_archive(args.archive, args.sources, overwrite=args.overwrite).path)
    elif args.command == "unpack":
        print(manager.extract_archive(args.archive, args.dest, overwrite=args.overwrite).path)
    elif args.command == "hash":
        print(f"{manager.hash_file(args.path, args.algo)}  {args.path}")


def main(argv: list[str] | None = None) -> int:
    """Entry point. Returns the process exit status.

    Command results are the only thing written to stdout; log lines go to
    stderr so the output can be captured by a shell.
    """
    args = build_parser().parse_args(argv)
    resolver = ConfigResolver(cli_args=_cli_overrides(args), user_config_path=args.config)

    set_log_stream(sys.stderr)
    try:
        apply_logging_policy(resolver.resolve_logging_policy())
        install_jsonl_sink(resolver=resolver)
        log.debug(f"command={args.command!r}")
        _run(args, resolver)
    except FileMasonError as e:
        log.error(str(e))
        return 1
    finally:
        set_log_stream(None)
    return 0


if __name__ == "__main__":
    sys.exit(main())

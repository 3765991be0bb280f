from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from tabulate import tabulate

from . import __version__
from .backend_registry import get_backend_choices, is_backend_available, list_backends
from .config import DEFAULT_BACKEND, TaggerConfig, build_tagger
from .doc import Document
from .errors import ConfigurationError
from .io_registry import registry as io_registry
from .pipeline import TaggingPipeline

TASK_CHOICES = ("tag", "backends")


def _configure_logging(args: argparse.Namespace) -> None:
    if getattr(args, "debug", False):
        level = logging.DEBUG
    elif getattr(args, "verbose", False):
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="[flexipos] %(levelname)s %(name)s: %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flexipos",
        description="flexipos: part-of-speech tagging stage for tokenized documents",
    )
    parser.add_argument("--version", "-V", action="version", version=f"flexipos {__version__}")
    subparsers = parser.add_subparsers(dest="task", required=False)

    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    parent_parser.add_argument("--verbose", action="store_true", help="Print high-level progress messages")

    # tag ---------------------------------------------------------------------
    tag_parser = subparsers.add_parser(
        "tag",
        help="POS tag tokenized documents (CoNLL-U or JSON)",
        parents=[parent_parser],
    )
    tag_parser.add_argument("inputs", nargs="*", default=["-"], help="Input files (use '-' or omit for STDIN)")
    tag_parser.add_argument("--output", "-o", default="-", help="Output file for a single input (default: STDOUT)")
    tag_parser.add_argument("--output-dir", type=Path, default=None, help="Output directory when tagging several inputs")
    tag_parser.add_argument("--input-format", choices=io_registry.names(), default=None, help="Input format (default: from file extension, else conllu)")
    tag_parser.add_argument("--output-format", choices=io_registry.names(), default=None, help="Output format (default: same as input)")
    tag_parser.add_argument("--backend", choices=get_backend_choices(), default=None, help=f"Tagging backend (default: {DEFAULT_BACKEND})")
    tag_parser.add_argument("--model", default=None, help="Model path or name for the backend")
    tag_parser.add_argument("--pos-map", type=Path, default=None, help="Fine -> coarse tag mapping file (FINE COARSE per line)")
    tag_parser.add_argument("--config", type=Path, default=None, help="Properties file with <prefix>.model / <prefix>.posMap entries")
    tag_parser.add_argument("--prefix", default="postagger", help="Property prefix used with --config (default: postagger)")
    tag_parser.add_argument("--padding-token", default=None, help="Token appended to single-word sentences (default: '.')")
    tag_parser.add_argument("--workers", type=int, default=None, help="Number of documents tagged in parallel")
    tag_parser.add_argument("--respect-existing", action="store_true", default=True, help="Keep existing POS tags (default)")
    tag_parser.add_argument("--no-respect-existing", dest="respect_existing", action="store_false", help="Retag words that already have a POS tag")
    tag_parser.add_argument("--stats", action="store_true", help="Print a summary table to STDERR")

    # backends ----------------------------------------------------------------
    backends_parser = subparsers.add_parser("backends", help="List available tagging backends", parents=[parent_parser])
    backends_parser.add_argument("--all", action="store_true", help="Include hidden backends")
    return parser


def _build_config(args: argparse.Namespace) -> TaggerConfig:
    overrides = {"respect_existing": args.respect_existing, "debug": args.debug}
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if args.padding_token:
        overrides["padding_token"] = args.padding_token
    if args.config:
        properties = TaggerConfig.load_properties(args.config)
        config = TaggerConfig.from_properties(properties, args.prefix, **overrides)
    else:
        config = TaggerConfig(**overrides)
    # explicit command-line values win over the properties file
    if args.backend:
        config.backend = args.backend
    if args.model:
        config.model = args.model
    if args.pos_map:
        config.pos_map = args.pos_map
    return config


def _read_inputs(args: argparse.Namespace) -> List[tuple[str, Document]]:
    loaded = []
    for input_path in args.inputs:
        entry = io_registry.get(args.input_format) if args.input_format else io_registry.detect(input_path)
        if input_path == "-":
            if sys.stdin.isatty():
                raise ConfigurationError("No input provided and STDIN is a terminal")
            document = entry.load(sys.stdin.read())
            document.meta.setdefault("source", "stdin")
        else:
            path = Path(input_path)
            if not path.exists():
                raise ConfigurationError(f"Input file not found: {path}")
            document = entry.load(path.read_text(encoding="utf-8"), doc_id=path.stem)
            document.meta.setdefault("source_path", str(path))
        document.meta["_format"] = entry.name
        loaded.append((input_path, document))
    return loaded


def _write_output(args: argparse.Namespace, input_path: str, document: Document, *, several: bool, model: Optional[str]) -> None:
    input_format = document.meta.pop("_format", "conllu")
    fmt = args.output_format or input_format
    entry = io_registry.get(fmt)
    text = entry.dump(document, model=model)
    if several and args.output_dir:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        stem = Path(input_path).stem if input_path != "-" else (document.id or "stdin")
        target = args.output_dir / f"{stem}{entry.extensions[0]}"
        target.write_text(text, encoding="utf-8")
    elif not several and args.output and args.output != "-":
        target = Path(args.output)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def run_tag(args: argparse.Namespace) -> int:
    try:
        config = _build_config(args)
        tagger = build_tagger(config)
        inputs = _read_inputs(args)
    except ConfigurationError as exc:
        print(f"[flexipos] Error: {exc}", file=sys.stderr)
        return 1

    several = len(inputs) > 1
    pipeline = TaggingPipeline(tagger, max_workers=config.max_workers)
    summary = pipeline.process_many([doc for _, doc in inputs])

    for (input_path, _), outcome in zip(inputs, summary.outcomes):
        if not outcome.ok:
            print(f"[flexipos] Error: tagging failed for {input_path}: {outcome.error}", file=sys.stderr)
            continue
        _write_output(args, input_path, outcome.document, several=several, model=config.model)

    if args.stats or args.verbose:
        rows = sorted(summary.totals().items())
        print(tabulate(rows, headers=["Statistic", "Count"]), file=sys.stderr)
    return 1 if summary.failed else 0


def run_backends(args: argparse.Namespace) -> int:
    rows = []
    for name, spec in sorted(list_backends(include_hidden=args.all).items()):
        rows.append([
            name,
            "yes" if is_backend_available(name) else "no",
            spec.description,
            spec.install_hint,
        ])
    print(tabulate(rows, headers=["Backend", "Available", "Description", "Install"]))
    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    else:
        argv = list(argv)

    if argv and argv[0] not in TASK_CHOICES and not argv[0].startswith("-"):
        argv = ["tag", *argv]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.task:
        parser.error("No task specified. Use one of: " + ", ".join(TASK_CHOICES))

    _configure_logging(args)
    if args.task == "tag":
        return run_tag(args)
    if args.task == "backends":
        return run_backends(args)

    parser.error(f"Unknown task '{args.task}'. Supported tasks: {', '.join(TASK_CHOICES)}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

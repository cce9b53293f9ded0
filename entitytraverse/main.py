import argparse
import json
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import fields
from functools import reduce
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from entitytraverse.errors import ConfigError
from entitytraverse.extractors.file_extractor import EntityExtractionResult, TypeScriptEntityExtractor, read_source
from entitytraverse.filtering.config import FilterPipelineConfig
from entitytraverse.syntax.tree_sitter_adapter import EXT_LANGUAGE
from entitytraverse.utils.logging_setup import configure_logging
from entitytraverse.utils.networkx_graph import build_graph_from_schema, combine_schemas, entities_to_schema, write_graph

logger = logging.getLogger(__name__)


def collect_files(paths: List[str]) -> List[Path]:
    files = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            files.extend(sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in EXT_LANGUAGE))
        elif path.is_file():
            files.append(path)
        else:
            logger.warning("skipping %s: no such file or directory", raw)
    return files


def output_path_for(result: EntityExtractionResult, output_base: str) -> str:
    json_rel = os.path.splitext(result.rel_file_path.lstrip("/"))[0] + ".json"
    return os.path.join(output_base, json_rel)


def _process_single_file_worker(args) -> EntityExtractionResult:
    code_path, extractor, output_base = args
    try:
        content = read_source(str(code_path))
    except OSError as e:
        logger.error("unable to read %s, skipping it: %s", code_path, e)
        return EntityExtractionResult(file_path=str(code_path), rel_file_path=str(code_path), error=str(e))
    result = extractor.extract_source(str(code_path), content)
    if output_base:
        out_path = output_path_for(result, output_base)
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
        with open(out_path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
    return result


def run_extract(
    paths: List[str],
    output_base: Optional[str] = "./output/entities",
    graph_dir: Optional[str] = None,
    config: Optional[FilterPipelineConfig] = None,
    root_dir: Optional[str] = None,
    workers: Optional[int] = None,
    strict: bool = False,
    show_progress: bool = True,
) -> List[EntityExtractionResult]:
    extractor = TypeScriptEntityExtractor(config=config, root_dir=root_dir, strict=strict)
    files = collect_files(paths)
    if not files:
        logger.warning("no JavaScript/TypeScript files found under %s", ", ".join(paths))
        return []

    tasks_args = [(code_path, extractor, output_base) for code_path in files]
    max_workers = workers or min(32, (os.cpu_count() or 1) + 4)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        results = list(tqdm(
            executor.map(_process_single_file_worker, tasks_args),
            total=len(tasks_args),
            desc="Extracting entities",
            disable=not show_progress,
        ))

    failed = [r for r in results if not r.ok]
    logger.info("extracted %d files, %d failed", len(results) - len(failed), len(failed))

    if graph_dir:
        schemas = [entities_to_schema(r.entities, r.rel_file_path) for r in results if r.ok]
        if schemas:
            G = build_graph_from_schema(reduce(combine_schemas, schemas))
            logger.info("wrote %s", write_graph(G, graph_dir))
    return results


def build_config(config_file: Optional[str], overrides: dict) -> FilterPipelineConfig:
    config = FilterPipelineConfig.from_file(config_file) if config_file else FilterPipelineConfig()
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def _add_config_flags(parser: argparse.ArgumentParser) -> None:
    for f in fields(FilterPipelineConfig):
        flag = f.name.replace("_", "-")
        if f.default:
            parser.add_argument(f"--no-{flag}", dest=f.name, action="store_const", const=False, default=None,
                                help=f"Disable {f.name}")
        else:
            parser.add_argument(f"--{flag}", dest=f.name, action="store_const", const=True, default=None,
                                help=f"Enable {f.name}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Entity extraction for JavaScript/TypeScript sources")
    subparsers = parser.add_subparsers(dest="function", help="Available functions")

    parser_extract = subparsers.add_parser("extract", help="Extract entities from files or directories")
    parser_extract.add_argument("paths", nargs="+", help="Files or directories to scan")
    parser_extract.add_argument("--output", default="./output/entities",
                                help="Output directory for per-file JSON (default: ./output/entities)")
    parser_extract.add_argument("--graph-dir", default=None, help="Write a GraphML entity graph here")
    parser_extract.add_argument("--config", default=None, help="JSON file with pipeline flags")
    parser_extract.add_argument("--root-dir", default=None,
                                help="Project root used for relative paths (default: ROOT_DIR or the scanned directory)")
    parser_extract.add_argument("--workers", type=int, default=None, help="Worker threads")
    parser_extract.add_argument("--strict", action="store_true", help="Treat files with syntax errors as failed")
    parser_extract.add_argument("--verbose", action="store_true", help="Debug logging")
    _add_config_flags(parser_extract)

    args = parser.parse_args(argv)

    if not args.function:
        parser.print_help()
        return 0

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    overrides = {f.name: getattr(args, f.name) for f in fields(FilterPipelineConfig)}
    try:
        config = build_config(args.config, overrides)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    root_dir = args.root_dir or os.environ.get("ROOT_DIR")
    if not root_dir and len(args.paths) == 1 and os.path.isdir(args.paths[0]):
        root_dir = args.paths[0]

    results = run_extract(
        args.paths,
        output_base=args.output,
        graph_dir=args.graph_dir,
        config=config,
        root_dir=root_dir,
        workers=args.workers,
        strict=args.strict,
    )
    print(f"Done! {sum(r.ok for r in results)}/{len(results)} files, outputs in: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

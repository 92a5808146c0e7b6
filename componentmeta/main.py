import argparse
import json
import os
import shutil
import sys
import traceback
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pathspec
from tqdm import tqdm

from componentmeta.adapters.component_adapter import adapt_component_descriptors
from componentmeta.config import load_config
from componentmeta.exceptions import ComponentMetaError, SourceParseError
from componentmeta.extractors.react_extractor import read_source
from componentmeta.registry.extractor_registry import dialect_for_path, get_extractor
from componentmeta.utils.log import configure_logging
from componentmeta.utils.networkx_graph import build_graph_from_schema, load_descriptors, write_graph

SKIPPED_DIRS = {"node_modules", ".git", "dist", "build"}


def collect_source_files(root_dir):
    root_dir = Path(root_dir)
    gitignore_pth = root_dir / ".gitignore"
    gitign_pattern = gitignore_pth.read_text().splitlines() if gitignore_pth.exists() else []
    spec = pathspec.PathSpec.from_lines("gitwildmatch", gitign_pattern)

    files = []
    for file_path in sorted(root_dir.rglob("*")):
        rel = file_path.relative_to(root_dir)
        if not file_path.is_file() or SKIPPED_DIRS.intersection(rel.parts):
            continue
        if spec.match_file(rel.as_posix()):
            continue
        if dialect_for_path(str(file_path)):
            files.append(file_path)
    return files


def _process_single_file_worker(args):
    code_path, root_dir_path, output_base_path, config = args
    try:
        extractor = get_extractor(dialect_for_path(str(code_path)), config)
        extractor.process_file(str(code_path))
        rel_path = os.path.relpath(code_path, root_dir_path)
        out_path = os.path.join(output_base_path, os.path.splitext(rel_path)[0] + ".json")
        extractor.write_to_file(out_path)
        return True
    except SourceParseError as e:
        print(f"Unable to parse - {code_path}: {e}. Skipping it.")
    except Exception:
        print(traceback.format_exc())
        print(f"Unable to process - {code_path}. Skipping it.")
    return False


def create_component_data(
    root_dir,
    output_base: str = "./output/components",
    graph_dir: str = "./output/graph",
    clear_existing: bool = True,
    skip_graph: bool = False,
    config=None,
):
    os.environ["ROOT_DIR"] = str(root_dir)
    config = config or load_config()
    files = collect_source_files(root_dir)

    if clear_existing:
        shutil.rmtree(output_base, ignore_errors=True)
        shutil.rmtree(graph_dir, ignore_errors=True)
    os.makedirs(output_base, exist_ok=True)

    tasks_args = [(code_path, root_dir, output_base, config) for code_path in files]
    with ThreadPoolExecutor(max_workers=min(32, (os.cpu_count() or 1) + 4)) as executor:
        results = list(tqdm(executor.map(_process_single_file_worker, tasks_args),
                            total=len(tasks_args), desc="Extracting components"))

    processed = sum(1 for ok in results if ok)
    print(f"Done! {processed}/{len(files)} files described in: {output_base}")
    if skip_graph:
        return {"processed": processed, "failed": len(files) - processed}

    schema = adapt_component_descriptors(load_descriptors(output_base))
    G = build_graph_from_schema(schema)
    graph_ml, graph_gp = write_graph(G, graph_dir)
    print(f"Wrote {graph_ml} and {graph_gp}")
    return {
        "processed": processed,
        "failed": len(files) - processed,
        "graphml": graph_ml,
        "gpickle": graph_gp,
    }


def extract_file(file_path, config=None):
    dialect = dialect_for_path(file_path) or "tsx"
    extractor = get_extractor(dialect, config)
    return extractor.extract(read_source(file_path), file_path.replace("\\", "/"))


def main(argv=None):
    parser = argparse.ArgumentParser(description="React component metadata extraction")
    parser.add_argument("--config", default=None, help="TOML file with an [extractor] table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="function", help="Available functions")

    parser_extract = subparsers.add_parser("extract", help="Print the descriptor of one component file")
    parser_extract.add_argument("file_path", help="Component source file")

    parser_create = subparsers.add_parser("create_component_data", help="Describe every component under a directory")
    parser_create.add_argument("root_dir", help="Root directory to scan for source files")
    parser_create.add_argument("--output_base", default="./output/components",
                               help="Output base directory (default: ./output/components)")
    parser_create.add_argument("--graph_dir", default="./output/graph",
                               help="Graph output directory (default: ./output/graph)")
    parser_create.add_argument("--no_clear", action="store_true",
                               help="Do not clear existing output directories")
    parser_create.add_argument("--skip_graph", action="store_true",
                               help="Only write descriptors, do not build the graph")

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose)

    if not args.function:
        parser.print_help()
        return 0

    try:
        config = load_config(args.config)
        if args.function == "extract":
            try:
                descriptor = extract_file(args.file_path, config)
            except SourceParseError as e:
                print(f"Error: failed to parse {args.file_path}: {e}", file=sys.stderr)
                return 1
            print(json.dumps(descriptor.to_dict(), indent=2, ensure_ascii=False))
        elif args.function == "create_component_data":
            print(f"Creating component data from: {args.root_dir}")
            print(f"Output base: {args.output_base}")
            print(f"Graph directory: {args.graph_dir}")
            create_component_data(
                root_dir=args.root_dir,
                output_base=args.output_base,
                graph_dir=args.graph_dir,
                clear_existing=not args.no_clear,
                skip_graph=args.skip_graph,
                config=config,
            )
    except (ComponentMetaError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

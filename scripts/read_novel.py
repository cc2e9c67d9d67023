"""CLI for importing, listing and reading plain-text novels chunk by chunk."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from library import NovelLibrary, NovelNotFoundError, ReadingSession
from loading import ChunkStore, ReaderConfig


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Read large plain-text novels in fixed-size chunks with saved positions.",
    )
    parser.add_argument(
        "--library",
        default=None,
        help="Library JSON file (default: READER_LIBRARY_PATH or data/library.json).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging output.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Copy a text file into the library.")
    import_parser.add_argument("path", help="Text file to import.")
    import_parser.add_argument("--title", default=None, help="Display title (default: file name).")

    subparsers.add_parser("list", help="List imported novels with their saved chunk.")

    read_parser = subparsers.add_parser("read", help="Print a chunk of a novel and save the position.")
    read_parser.add_argument("novel_id", help="Id shown by the list command.")
    nav_group = read_parser.add_mutually_exclusive_group()
    nav_group.add_argument("--chunk", type=int, default=None, help="Jump to this chunk index.")
    nav_group.add_argument("--next", action="store_true", help="Advance one chunk from the saved position.")
    nav_group.add_argument("--previous", action="store_true", help="Go back one chunk from the saved position.")

    remove_parser = subparsers.add_parser("remove", help="Remove a novel and its copied file.")
    remove_parser.add_argument("novel_id", help="Id shown by the list command.")

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s")


def cmd_import(library: NovelLibrary, args: argparse.Namespace) -> int:
    novel = library.import_file(Path(args.path), title=args.title)
    print(f"Imported '{novel.title}' as {novel.novel_id}")
    return 0


def cmd_list(library: NovelLibrary, args: argparse.Namespace) -> int:
    novels = library.list_novels()
    if not novels:
        print("Library is empty.")
        return 0
    for novel in novels:
        print(f"{novel.novel_id}  {novel.title}  (chunk {novel.last_chunk_index})")
    return 0


def cmd_read(library: NovelLibrary, config: ReaderConfig, args: argparse.Namespace) -> int:
    novel = library.get(args.novel_id)

    with ChunkStore(config) as store:
        session = ReadingSession(store, library, novel.novel_id, novel.file_path)
        state = session.open().result()
        if state is None or state.error:
            print(state.error if state else "Load was cancelled.", file=sys.stderr)
            return 1
        if state.total_chunks == 0:
            print("(empty file)")
            return 0

        if args.chunk is not None:
            if not session.jump_to(args.chunk):
                print(
                    f"Chunk {args.chunk} out of range (0..{state.total_chunks - 1}).",
                    file=sys.stderr,
                )
                session.close()
                return 1
        elif args.next:
            session.next_chunk()
        elif args.previous:
            session.previous_chunk()

        print(store.content)
        print()
        print(
            f"--- {novel.title}: chunk {store.current_chunk_index + 1}/{store.total_chunks} "
            f"({int(session.progress() * 100)}%) ---"
        )
        session.close()
    return 0


def cmd_remove(library: NovelLibrary, args: argparse.Namespace) -> int:
    novel = library.remove_novel(args.novel_id)
    print(f"Removed '{novel.title}'")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = ReaderConfig.from_env()
    except ValueError as exc:
        logging.error("Invalid configuration: %s", exc)
        return 2

    library_path = Path(args.library) if args.library else config.library_path
    library = NovelLibrary(library_path)

    try:
        if args.command == "import":
            return cmd_import(library, args)
        if args.command == "list":
            return cmd_list(library, args)
        if args.command == "read":
            return cmd_read(library, config, args)
        if args.command == "remove":
            return cmd_remove(library, args)
    except NovelNotFoundError as exc:
        print(f"Unknown novel: {exc.args[0]}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    return 1


if __name__ == "__main__":
    sys.exit(main())

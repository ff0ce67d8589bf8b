import argparse
import asyncio
import logging
from pathlib import Path

import FS_Snapshot.cli.snapshot as snapshot_cli
from FS_Snapshot.core.errors import SnapshotError

logger = logging.getLogger("FS_Snapshot")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="fs-snapshot",
        description="Print a checksummed snapshot of a directory tree as JSON.",
    )
    p.add_argument("path", nargs="?", help="Root of the subtree to snapshot")
    p.add_argument("--algorithm", help="hashlib algorithm name (default: sha1)")
    p.add_argument("--chunk-size", type=int, help="Bytes read per block while hashing files")
    p.add_argument("--interleaved", action="store_true", default=None,
                   help="Walk and checksum in a single pass")
    p.add_argument("--structure-only", action="store_true",
                   help="Only capture the structure, without checksums")
    p.add_argument("--from-structure", type=Path,
                   help="Checksum a previously captured structure instead of walking")
    p.add_argument("--parent", help="Directory containing the root of --from-structure")
    p.add_argument("-o", "--output", type=Path, help="Write JSON here instead of stdout")
    p.add_argument("--indent", type=int, help="JSON indent")
    p.add_argument("--settings", type=Path, help="Settings JSON file")
    p.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = snapshot_cli.validate_settings(snapshot_cli.load_settings(args.settings))
    except SnapshotError as exc:
        snapshot_cli.configure_logging("WARNING")
        logger.error("%s", exc)
        return 1

    snapshot_cli.configure_logging("DEBUG" if args.verbose else settings["logging"]["level"])

    try:
        asyncio.run(
            snapshot_cli.run(
                path=args.path,
                settings=settings,
                algorithm=args.algorithm,
                chunk_size=args.chunk_size,
                interleaved=args.interleaved,
                structure_only=args.structure_only,
                from_structure=args.from_structure,
                parent=args.parent,
                output=args.output,
                indent=args.indent,
            )
        )
    except SnapshotError as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

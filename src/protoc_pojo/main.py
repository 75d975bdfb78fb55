from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from protoc_pojo.generator.java_pojo_generator import generate_java_from_proto
from protoc_pojo.parser.proto_grammar import ProtoError


def _find_files(working_path: str, extensions: List[str]) -> List[str]:
    """Recursively find files with given extensions under working_path."""
    results = []
    for ext in extensions:
        results.extend(str(p) for p in Path(working_path).rglob(f"*{ext}"))
    return sorted(results)


def run(working_path: str, output_dir: Optional[str] = None) -> List[str]:
    """Main pipeline: find .proto files, generate Java sources, write them.

    Returns list of generated file paths.
    """
    output_dir = output_dir or working_path

    # 1. Find input files
    proto_files = _find_files(working_path, [".proto"])
    if not proto_files:
        print(f"FATAL: No .proto files found under {working_path}", file=sys.stderr)
        sys.exit(1)

    print(f"Found {len(proto_files)} proto file(s)")

    # 2. Parse and render each file completely before writing any of it
    generated: List[str] = []
    for pf in proto_files:
        try:
            sources = generate_java_from_proto(pf)
        except ProtoError as e:
            print(f"FATAL: {pf}: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"  Parsed {pf}: {len(sources)} type(s)")

        # 3. Write
        for rel_path, source in sources:
            file_path = os.path.join(output_dir, *rel_path.split("/"))
            os.makedirs(os.path.dirname(file_path), exist_ok=True)
            Path(file_path).write_text(source, encoding="utf-8")
            generated.append(file_path)
            print(f"  Generated: {file_path}")

    print("Done!")
    return generated


def main():
    parser = argparse.ArgumentParser(
        description="Protobuf to Java POJO Generator",
    )
    parser.add_argument(
        "--working-path",
        required=True,
        help="Path to scan for .proto files",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to write generated Java sources to (defaults to the working path)",
    )

    args = parser.parse_args()
    run(args.working_path, args.output_dir)


if __name__ == "__main__":
    main()

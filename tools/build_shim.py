#!/usr/bin/env python3
"""Compile the giac shim library from csrc/ with the system C++ compiler."""

from __future__ import annotations

import argparse
import os
import shlex
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
CSRC = ROOT / "csrc"
PACKAGE_DIR = ROOT / "src" / "giacffi"


def default_library_name() -> str:
    if sys.platform == "darwin":
        return "libgiacffi_shim.dylib"
    if os.name == "nt":
        return "giacffi_shim.dll"
    return "libgiacffi_shim.so"


def build_command(compiler: str, output: Path, extra: list[str]) -> list[str]:
    sources = sorted(str(p) for p in CSRC.glob("*.cpp"))
    if not sources:
        raise FileNotFoundError(f"no C++ sources found in {CSRC}")
    cmd = [compiler, "-shared", "-fPIC", "-O2", f"-I{CSRC}"]
    cmd.extend(extra)
    cmd.extend(sources)
    cmd.extend(["-o", str(output), "-lgiac", "-lgmp"])
    return cmd


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build the giac shim shared library.")
    parser.add_argument(
        "--output",
        type=Path,
        default=PACKAGE_DIR / default_library_name(),
        help="Path of the library to write (default: inside the giacffi package).",
    )
    parser.add_argument(
        "--cxx",
        default=os.environ.get("CXX", "c++"),
        help="C++ compiler to use (default: $CXX or c++).",
    )
    parser.add_argument(
        "--flag",
        action="append",
        default=[],
        metavar="FLAG",
        help="Extra compiler flag, e.g. --flag=-I/opt/giac/include (can be repeated).",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the command only.")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cmd = build_command(args.cxx, args.output, args.flag)
    print(" ".join(shlex.quote(part) for part in cmd))
    if args.dry_run:
        return 0
    args.output.parent.mkdir(parents=True, exist_ok=True)
    result = subprocess.run(cmd)
    if result.returncode != 0:
        print("shim build failed", file=sys.stderr)
        return result.returncode
    print(f"wrote {args.output}")
    print(f"export GIACFFI_LIB_PATH={shlex.quote(str(args.output.resolve()))}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

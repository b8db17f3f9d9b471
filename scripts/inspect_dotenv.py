from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from envline import DotEnv, FileUnreadable, read, read_async


def main() -> int:
    ap = argparse.ArgumentParser(description="Parse a dotenv file and print its KEY=VALUE entries.")
    ap.add_argument("path", help="Path or URI of the dotenv file (e.g. .env or s3://bucket/app/.env)")
    ap.add_argument("--encoding", default="utf-8")
    ap.add_argument("--async", dest="use_async", action="store_true", help="Read on a worker pool and parse the raw Arrow buffer.")
    ap.add_argument("--max-width", type=int, default=60, help="Truncate printed values to N chars (0 = no limit)")
    args = ap.parse_args()

    try:
        if args.use_async:
            dotenv: DotEnv = read_async(args.path, encoding=args.encoding).result()
        else:
            dotenv = read(args.path, encoding=args.encoding)
    except FileUnreadable as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(f"path: {dotenv.path}")
    print(f"entries: {len(dotenv)}")

    df = dotenv.to_table().to_pandas()
    if df.empty:
        return 0

    df["duplicate"] = df["key"].duplicated(keep="first")
    # Escape newlines from double-quoted values so each entry stays on one row.
    df["value"] = df["value"].str.replace("\n", "\\n", regex=False)

    print()
    print(df.to_string(index=False, max_colwidth=args.max_width or None))

    dupes = int(df["duplicate"].sum())
    if dupes:
        print(f"\nduplicate keys (first occurrence wins unless overwriting): {dupes}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

"""Print the shape of each source CSV: row count, columns and the first rows."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd

from config import settings  # type: ignore
from processor.records import SOURCE_FILES, read_csv_frame  # type: ignore


def describe_csv(path: Path, head: int = 2) -> Dict[str, Any]:
    if not path.exists():
        return {"file": path.name, "exists": False}
    try:
        df = read_csv_frame(path)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        return {"file": path.name, "exists": True, "error": str(e)}
    return {
        "file": path.name,
        "exists": True,
        "rows": len(df),
        "columns": list(df.columns),
        "head": df.head(head).to_dict(orient="records"),
    }


def analyse(raw_dir: Path, head: int = 2) -> List[Dict[str, Any]]:
    return [describe_csv(Path(raw_dir) / name, head) for name in SOURCE_FILES]


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect the project CSV exports")
    parser.add_argument("--raw-dir", default=settings.raw_dir, type=Path)
    parser.add_argument("--head", default=2, type=int)
    args = parser.parse_args(argv)

    if not args.raw_dir.exists():
        print(f"Data directory does not exist: {args.raw_dir}")
        return 1

    for report in analyse(args.raw_dir, args.head):
        print(f"\n=== {report['file']} ===")
        if not report["exists"]:
            print("  File not found")
            continue
        if "error" in report:
            print(f"  Error reading file: {report['error']}")
            continue
        print(f"  Total rows: {report['rows']}")
        print(f"  Columns: {report['columns']}")
        for i, row in enumerate(report["head"], start=1):
            print(f"  Row {i}: {json.dumps(row, ensure_ascii=False, indent=2)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

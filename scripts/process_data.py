import argparse
import json
import sys
from pathlib import Path
from typing import List, Tuple

# Ensure we can import project modules when running as a script
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import settings  # type: ignore
from processor.extractors import format_price  # type: ignore
from processor.merge import ValidationReport, collect_statistics  # type: ignore
from processor.models import Property  # type: ignore
from processor.pipeline import process_property_data  # type: ignore
from scripts.utils import ensure_dirs, setup_script_logging  # type: ignore

logger = setup_script_logging("process_data", "process.log")


def run(raw_dir: Path, processed_out: Path) -> Tuple[List[Property], ValidationReport]:
    ensure_dirs()
    return process_property_data(raw_dir, processed_out)


def print_samples(properties: List[Property], limit: int = 3) -> None:
    if not properties:
        print("No valid properties to sample.")
        return

    stats = collect_statistics(properties)
    print(f"\nFinal cities: {', '.join(stats['cities'])}")
    print(f"Final BHK types: {', '.join(str(b) for b in stats['bhk_types'])}")
    print(f"Final price range: {stats['price_range']}")
    print(f"Final area range: {stats['area_range']}")

    print("\nSample final properties:\n")
    for i, prop in enumerate(properties[:limit], start=1):
        print(
            f"  {i}. {prop.project_name} | {prop.city} | {prop.locality or 'N/A'} | "
            f"{prop.bhk}BHK | {format_price(prop.price)} | {prop.area:g} sq.ft"
        )

    print("\nFirst entry as stored:\n")
    print(json.dumps(properties[0].to_dict(), ensure_ascii=False, indent=2))


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Merge project, address, configuration and variant CSVs into validated properties"
    )
    parser.add_argument("--raw-dir", default=settings.raw_dir, type=Path)
    parser.add_argument("--processed-out", default=settings.processed_path, type=Path)
    parser.add_argument("--samples", default=3, type=int)
    args = parser.parse_args(argv)

    properties, report = run(args.raw_dir, args.processed_out)

    print(
        f"Totals -> merged: {report.total} | valid: {report.kept} | "
        f"dropped: {report.dropped} {dict(report.rejected)}"
    )
    print_samples(properties, args.samples)
    logger.info("Data processing completed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

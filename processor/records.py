"""Load the four project CSV exports into plain row lists."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

logger = logging.getLogger(__name__)

Row = Dict[str, str]

PROJECT_FILE = "project.csv"
ADDRESS_FILE = "ProjectAddress.csv"
CONFIGURATION_FILE = "ProjectConfiguration.csv"
VARIANT_FILE = "ProjectConfigurationVariant.csv"

SOURCE_FILES = (PROJECT_FILE, ADDRESS_FILE, CONFIGURATION_FILE, VARIANT_FILE)


@dataclass(frozen=True)
class RecordSet:
    projects: List[Row] = field(default_factory=list)
    addresses: List[Row] = field(default_factory=list)
    configurations: List[Row] = field(default_factory=list)
    variants: List[Row] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "projects": len(self.projects),
            "addresses": len(self.addresses),
            "configurations": len(self.configurations),
            "variants": len(self.variants),
        }


def read_csv_frame(path: Path) -> pd.DataFrame:
    """Read every column as text; blank cells stay "" instead of NaN.

    Undecodable bytes become U+FFFD rather than failing the whole file.
    """
    df = pd.read_csv(
        path,
        dtype=str,
        keep_default_na=False,
        encoding="utf-8",
        encoding_errors="replace",
        on_bad_lines="skip",
    )
    df.columns = df.columns.str.strip()
    return df


def load_csv(path: Path) -> List[Row]:
    """Return the rows of one CSV file; a missing, empty or unparseable file yields []."""
    if not path.exists():
        logger.warning(f"File not found: {path}")
        return []
    try:
        df = read_csv_frame(path)
    except pd.errors.EmptyDataError:
        logger.warning(f"File is empty: {path}")
        return []
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        logger.warning(f"Could not parse {path}: {e}")
        return []
    rows: List[Row] = df.to_dict(orient="records")
    logger.info(f"{path.name}: {len(rows)} records")
    return rows


def load_records(raw_dir: Path) -> RecordSet:
    raw_dir = Path(raw_dir)
    logger.info(f"Loading CSV files from {raw_dir}")
    records = RecordSet(
        projects=load_csv(raw_dir / PROJECT_FILE),
        addresses=load_csv(raw_dir / ADDRESS_FILE),
        configurations=load_csv(raw_dir / CONFIGURATION_FILE),
        variants=load_csv(raw_dir / VARIANT_FILE),
    )
    logger.info(f"CSV files loaded: {records.counts()}")
    return records

"""Block master data import from yard CSV exports.

Each CSV lists one ship's blocks as section (区画) / large block (大組) /
medium block (中組) columns. Section and large block cells are only filled on
the first row of each group, so they are carried forward to following rows.
"""

import argparse
import csv
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from sqlalchemy.orm import Session

from dejihai.database.master_repository import BlockRepository, ShipRepository

logger = logging.getLogger(__name__)

HEADER_MARKER = "区画"
SUMMARY_MARKERS = ("区画計", "本体区分計")
TOTAL_MARKER = "計"
FULLWIDTH_SPACE = "　"

# Files shipped with the yard's initial data drop: (file name, ship number)
DEFAULT_SOURCES = [
    ("block_list_S6313.csv", "S6313"),
    ("block_list_S6300.csv", "S6300"),
    ("block_list_S6292.csv", "S6292"),
    ("block_list_S6278.csv", "S6278"),
]


@dataclass(frozen=True)
class BlockRow:
    section: str
    large_block: str
    medium_block: str


def _cell(row: Sequence[str], index: int) -> str:
    if index >= len(row) or row[index] is None:
        return ""
    return row[index].strip(" \t\r\n" + FULLWIDTH_SPACE)


def parse_block_rows(records: Iterable[Sequence[str]]) -> List[BlockRow]:
    """Extract block paths from raw CSV records.

    Data starts two rows below the first row whose first cell mentions 区画
    (the header and a "ブロック" caption row). Subtotal rows are skipped.
    """
    records = list(records)

    start_index = 0
    for i, record in enumerate(records):
        if record and HEADER_MARKER in (record[0] or ""):
            start_index = i + 2
            break

    blocks: List[BlockRow] = []
    current_section = ""
    current_large = ""

    for record in records[start_index:]:
        if not record:
            continue
        first = record[0] or ""
        if any(marker in first for marker in SUMMARY_MARKERS):
            continue

        section = _cell(record, 0)
        large = _cell(record, 1)
        medium = _cell(record, 2)

        if section and TOTAL_MARKER not in section:
            current_section = section
        if large:
            current_large = large

        if medium and current_section and current_large:
            blocks.append(BlockRow(current_section, current_large, medium))

    return blocks


def parse_block_csv(path: Path) -> List[BlockRow]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return parse_block_rows(csv.reader(f))


def import_blocks(db: Session, path: Path, ship_number: str) -> int:
    """Import one ship's block list, creating the ship if needed.

    Re-importing the same file is a no-op.

    Returns:
        Number of newly inserted blocks
    """
    ship = ShipRepository(db).get_or_create(ship_number, name=f"工事番号 {ship_number}")
    blocks = parse_block_csv(path)
    logger.info(f"Found {len(blocks)} blocks for {ship_number} in {path.name}")

    repo = BlockRepository(db)
    inserted = 0
    for block in blocks:
        if repo.upsert(ship.id, block.section, block.large_block, block.medium_block):
            inserted += 1

    logger.info(f"Inserted {inserted} blocks for {ship_number}")
    return inserted


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Import block master data from CSV files.")
    parser.add_argument("csv_file", nargs="?", help="CSV file to import (default: the bundled data directory)")
    parser.add_argument("--ship", help="Ship number for csv_file (e.g. S6313)")
    parser.add_argument("--data-dir", default="data", help="Directory holding the default CSV files")
    args = parser.parse_args(argv)

    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))

    if args.csv_file and not args.ship:
        parser.error("--ship is required when a CSV file is given")

    sources = (
        [(Path(args.csv_file), args.ship)]
        if args.csv_file
        else [(Path(args.data_dir) / name, number) for name, number in DEFAULT_SOURCES]
    )

    from dejihai.database.database import SessionLocal, init_db

    init_db()
    db = SessionLocal()
    try:
        for path, ship_number in sources:
            if not path.exists():
                logger.warning(f"File not found: {path}")
                continue
            import_blocks(db, path, ship_number)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

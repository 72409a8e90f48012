"""
Q&A Importer
============
Loads curated question/answer pairs from CSV into the qa_pairs table.

Expected columns: question, answer and optionally audience, category, tags
(comma- or semicolon-separated). Rows missing a question or answer, or
carrying an unknown audience, are skipped with a warning. A question that
already exists for the same audience is skipped as a duplicate.

CLI:
    python -m data_pipeline.qa_importer path/to/qa.csv [--source-id ID] [--replace]

Notes:
    - `--replace` deletes the rows previously imported under the same
      source id before inserting, so re-running an import is idempotent
"""

import asyncio
import csv
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple
from tqdm import tqdm

# Add parent to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from mobiya.config import settings
from mobiya.logger import setup_logger
from mobiya.models.database import QAPair, async_session_maker, init_db, normalize_question, question_hash

AUDIENCES = {"public", "employee"}
REQUIRED_COLUMNS = {"question", "answer"}


class QAImporter:
    """
    Imports curated Q&A rows into the database.

    Typical Flow:
    - Read CSV rows → validate → drop duplicates → insert → log summary.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("qa_importer")
        self.stats = {"parsed": 0, "inserted": 0, "skipped_invalid": 0, "skipped_duplicate": 0, "replaced": 0}

    def read_rows(self, csv_path: Path) -> List[Dict[str, str]]:
        """Read the CSV into dicts keyed by lowercased header"""
        csv_path = Path(csv_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found at: {csv_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            headers = {(h or "").strip().lower() for h in (reader.fieldnames or [])}
            missing = REQUIRED_COLUMNS - headers
            if missing:
                raise ValueError(f"CSV is missing required columns: {', '.join(sorted(missing))}")

            rows = []
            for raw in reader:
                rows.append({
                    (k or "").strip().lower(): (v or "").strip()
                    for k, v in raw.items()
                    if k is not None and not isinstance(v, list)
                })

        self.logger.info(f"Read {len(rows)} rows from {csv_path.name}")
        return rows

    def validate_row(self, row: Dict[str, str], line_no: int) -> Optional[Dict]:
        """
        Turn one CSV row into QAPair.build keyword arguments

        Returns:
            Dict of fields, or None if the row is unusable
        """
        question = row.get("question", "")
        answer = row.get("answer", "")
        if not question or not answer:
            self.logger.warning(f"Skipping row {line_no}: missing question or answer")
            return None

        audience = (row.get("audience") or "public").lower()
        if audience not in AUDIENCES:
            self.logger.warning(f"Skipping row {line_no}: unknown audience '{audience}'")
            return None

        tags = [t.strip() for t in re.split(r"[,;]", row.get("tags", "")) if t.strip()]
        return {
            "question": question,
            "answer": answer,
            "audience": audience,
            "category": row.get("category") or None,
            "tags": tags,
            "language": row.get("language") or "en",
        }

    async def existing_keys(self, session: AsyncSession) -> Set[Tuple[str, str]]:
        """(question_hash, audience) pairs already stored"""
        result = await session.execute(select(QAPair.question_hash, QAPair.audience))
        return {(h, a) for h, a in result.all()}

    async def import_rows(
        self,
        session: AsyncSession,
        rows: List[Dict[str, str]],
        source_id: str,
        replace: bool = False
    ) -> int:
        """
        Insert validated rows

        Args:
            session: Open database session; committed on success
            rows: Rows from read_rows
            source_id: Recorded on every inserted pair
            replace: Delete pairs previously imported under source_id first

        Returns:
            Number of inserted pairs
        """
        if replace:
            result = await session.execute(delete(QAPair).where(QAPair.source_id == source_id))
            self.stats["replaced"] = result.rowcount or 0
            if self.stats["replaced"]:
                self.logger.info(f"Deleted {self.stats['replaced']} pairs previously imported as {source_id}")

        seen = await self.existing_keys(session)

        # Header is line 1
        for line_no, row in enumerate(tqdm(rows, desc="Importing", disable=len(rows) < 50), start=2):
            self.stats["parsed"] += 1
            fields = self.validate_row(row, line_no)
            if fields is None:
                self.stats["skipped_invalid"] += 1
                continue

            key = (question_hash(normalize_question(fields["question"])), fields["audience"])
            if key in seen:
                self.logger.debug(f"Skipping row {line_no}: duplicate question '{fields['question'][:50]}'")
                self.stats["skipped_duplicate"] += 1
                continue
            seen.add(key)

            session.add(QAPair.build(source_id=source_id, **fields))
            self.stats["inserted"] += 1

        await session.commit()
        return self.stats["inserted"]

    async def import_file(self, csv_path: Path, source_id: Optional[str] = None, replace: bool = False) -> int:
        """Read a CSV and import it in one session"""
        csv_path = Path(csv_path)
        if source_id is None:
            source_id = f"{csv_path.stem}-{datetime.now().strftime('%Y%m%d%H%M%S')}"

        rows = self.read_rows(csv_path)

        await init_db()
        async with async_session_maker() as session:
            inserted = await self.import_rows(session, rows, source_id, replace=replace)

        self.logger.info("=" * 70)
        self.logger.info("IMPORT COMPLETE")
        self.logger.info(f"  Source ID: {source_id}")
        self.logger.info(f"  Inserted: {inserted}")
        self.logger.info(f"  Skipped (invalid): {self.stats['skipped_invalid']}")
        self.logger.info(f"  Skipped (duplicate): {self.stats['skipped_duplicate']}")
        self.logger.info("=" * 70)
        return inserted


def main():
    """CLI entry point to import curated Q&A pairs from CSV."""
    import argparse

    parser = argparse.ArgumentParser(description="Import curated Q&A pairs from CSV")
    parser.add_argument("csv_path", type=Path, help="CSV file with question,answer[,audience,category,tags]")
    parser.add_argument("--source-id", default=None, help="Source id stored on each pair (default: file name + timestamp)")
    parser.add_argument("--replace", action="store_true", help="Delete pairs previously imported under the same source id")
    args = parser.parse_args()

    logger = setup_logger("qa_importer", log_dir=settings.log_dir or None, level=settings.log_level)
    importer = QAImporter(logger=logger)
    asyncio.run(importer.import_file(args.csv_path, source_id=args.source_id, replace=args.replace))


if __name__ == "__main__":
    main()

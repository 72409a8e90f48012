"""
Unit Tests for Data Pipeline
============================
Tests for the curated Q&A CSV importer
"""

import logging
import pytest
import tempfile
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select

from data_pipeline.qa_importer import QAImporter
from mobiya.models.database import QAPair

CSV_CONTENT = """question,answer,audience,category,tags
What services does Mobiloitte provide?,"AI, blockchain and mobile apps.",public,company,"services;offerings"
How many casual leaves do I get?,12 per year.,employee,hr,leave
,Missing question,public,,
Who is the CEO?,Someone.,board,,
what services does mobiloitte provide,Duplicate of the first row.,public,,
"""


def write_csv(content: str) -> Path:
    tmpdir = tempfile.mkdtemp()
    path = Path(tmpdir) / "qa.csv"
    path.write_text(content, encoding="utf-8")
    return path


class TestReadRows:
    """Tests for CSV parsing"""

    def test_read_rows(self):
        importer = QAImporter(logger=logging.getLogger("test"))
        rows = importer.read_rows(write_csv(CSV_CONTENT))

        assert len(rows) == 5
        assert rows[0]["answer"] == "AI, blockchain and mobile apps."
        assert rows[1]["audience"] == "employee"

    def test_missing_file(self):
        importer = QAImporter(logger=logging.getLogger("test"))
        with pytest.raises(FileNotFoundError):
            importer.read_rows(Path(tempfile.mkdtemp()) / "absent.csv")

    def test_missing_required_column(self):
        importer = QAImporter(logger=logging.getLogger("test"))
        with pytest.raises(ValueError):
            importer.read_rows(write_csv("question,category\nq,c\n"))

    def test_validate_row(self):
        importer = QAImporter(logger=logging.getLogger("test"))

        fields = importer.validate_row(
            {"question": "Q?", "answer": "A", "tags": "a, b;c", "audience": "Employee"}, 2
        )
        assert fields["tags"] == ["a", "b", "c"]
        assert fields["audience"] == "employee"
        assert fields["category"] is None

        assert importer.validate_row({"question": "Q?", "answer": ""}, 3) is None
        assert importer.validate_row({"question": "Q?", "answer": "A", "audience": "admin"}, 4) is None


class TestImportRows:
    """Tests for database import"""

    @pytest.mark.asyncio
    async def test_import_skips_invalid_and_duplicates(self, test_db):
        importer = QAImporter(logger=logging.getLogger("test"))
        rows = importer.read_rows(write_csv(CSV_CONTENT))

        inserted = await importer.import_rows(test_db, rows, source_id="qa-test")

        assert inserted == 2
        assert importer.stats["skipped_invalid"] == 2
        assert importer.stats["skipped_duplicate"] == 1

        pairs = (await test_db.execute(select(QAPair).order_by(QAPair.question))).scalars().all()
        assert [p.audience for p in pairs] == ["employee", "public"]
        assert all(p.source_id == "qa-test" for p in pairs)
        services = [p for p in pairs if p.audience == "public"][0]
        assert services.tag_list == ["services", "offerings"]
        assert services.category == "company"

    @pytest.mark.asyncio
    async def test_reimport_is_deduplicated(self, test_db):
        """Running the same file twice inserts nothing new"""
        rows = QAImporter(logger=logging.getLogger("test")).read_rows(write_csv(CSV_CONTENT))

        await QAImporter(logger=logging.getLogger("test")).import_rows(test_db, rows, source_id="first")
        second = await QAImporter(logger=logging.getLogger("test")).import_rows(test_db, rows, source_id="second")

        assert second == 0

    @pytest.mark.asyncio
    async def test_replace_reimports_source(self, test_db):
        """--replace swaps out the rows of the same source id"""
        rows = QAImporter(logger=logging.getLogger("test")).read_rows(write_csv(CSV_CONTENT))
        await QAImporter(logger=logging.getLogger("test")).import_rows(test_db, rows, source_id="qa")

        importer = QAImporter(logger=logging.getLogger("test"))
        inserted = await importer.import_rows(test_db, rows, source_id="qa", replace=True)

        assert importer.stats["replaced"] == 2
        assert inserted == 2
        total = (await test_db.execute(select(QAPair))).scalars().all()
        assert len(total) == 2

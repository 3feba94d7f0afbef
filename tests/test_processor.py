"""
Tests for the checklist processor facade.

Tests cover:
- parse / process / process_file
- generate_checklist helper
- Parse failures surface without partial results
"""
from datetime import date

import pytest


class TestMISMOChecklistProcessor:
    """Tests for MISMOChecklistProcessor."""

    @pytest.fixture
    def processor(self):
        from mismo_checklist.processor import MISMOChecklistProcessor
        return MISMOChecklistProcessor()

    def test_parse_returns_deal(self, processor, mismo_xml, reference_date):
        deal = processor.parse(mismo_xml(), reference_date)

        assert deal.borrower_count == 1
        assert deal.loan.is_purchase

    def test_process_returns_checklist(self, processor, mismo_xml, reference_date):
        result = processor.process(mismo_xml(), reference_date)

        assert "Executed purchase contract" in [d.name for d in result.general]
        assert result.summary.borrower_names == ["Jane Doe"]

    def test_process_file(self, processor, mismo_xml, reference_date, tmp_path):
        path = tmp_path / "loan.xml"
        path.write_text(mismo_xml(loan_purpose="Refinance"), encoding="utf-8")

        result = processor.process_file(path, reference_date)

        assert "Promissory Note (copy)" in [d.name for d in result.general]

    def test_malformed_xml(self, processor, reference_date):
        from mismo_checklist.exceptions import MISMOParseError

        with pytest.raises(MISMOParseError):
            processor.process("<MESSAGE><DEAL>", reference_date)

    def test_reference_date_drives_tax_years(self, processor, mismo_xml):
        xml = mismo_xml(borrowers=[{"name": "Jane", "incomes": [("Base", 5000)]}])

        before = processor.process(xml, date(2026, 4, 14))
        after = processor.process(xml, date(2026, 4, 15))

        assert "[Jane] W-2 forms - 2023-2024" in [d.name for d in before.income]
        assert "[Jane] W-2 forms - 2024-2025" in [d.name for d in after.income]

    def test_custom_engine(self, mismo_xml, reference_date):
        from unittest.mock import MagicMock

        from mismo_checklist.processor import MISMOChecklistProcessor

        engine = MagicMock()
        processor = MISMOChecklistProcessor(engine=engine)
        processor.process(mismo_xml(), reference_date)

        engine.evaluate.assert_called_once()
        assert engine.evaluate.call_args[0][1] == reference_date


class TestGenerateChecklist:
    """Tests for the module-level helper."""

    def test_generate_checklist(self, mismo_xml, reference_date):
        from mismo_checklist import generate_checklist

        result = generate_checklist(mismo_xml(), reference_date)

        assert result.general[0].name == "IRS Form 4506-C (transcript authorization)"

"""Tests for the batch processor and the command-line interface."""

import json

import pytest
from click.testing import CliRunner
from receipt_extractor.cli import ReceiptProcessor, cli
from receipt_extractor.exceptions import UnsupportedDocumentError
from receipt_extractor.ocr import SAMPLE_RECEIPT_TEXT


def json_output(result):
    """Decode the JSON document printed by a command."""
    stdout = result.stdout
    return json.loads(stdout[stdout.index('{'):])


@pytest.fixture
def receipts_dir(tmp_path):
    """Input folder with a complete receipt, a partial one, a broken image and an unrelated file."""
    input_dir = tmp_path / "in"
    (input_dir / "nested").mkdir(parents=True)
    (input_dir / "a.txt").write_text(SAMPLE_RECEIPT_TEXT, encoding='utf-8')
    (input_dir / "nested" / "b.txt").write_text("ACME\nTOTAL 10.00", encoding='utf-8')
    (input_dir / "c.png").write_bytes(b"not an image")
    (input_dir / "notes.docx").write_bytes(b"ignored")
    return input_dir


class TestReceiptProcessor:
    """Test suite for ReceiptProcessor."""

    def test_find_files_by_suffix(self, receipts_dir):
        """Auto mode only picks up supported suffixes, recursively."""
        processor = ReceiptProcessor()
        names = [p.name for p in processor.find_receipt_files(receipts_dir)]

        assert names == ["a.txt", "c.png", "b.txt"]

    def test_find_files_explicit_provider(self, receipts_dir):
        """An explicit provider takes every file."""
        processor = ReceiptProcessor(provider='text')
        assert len(processor.find_receipt_files(receipts_dir)) == 4

    def test_process_file(self, receipts_dir):
        """A single file is parsed and stored."""
        processor = ReceiptProcessor()
        result = processor.process_file(receipts_dir / "a.txt")

        assert result.filename == "a.txt"
        assert result.data.amount == 88.00
        assert processor.store.get(result.id) is result

    def test_process_file_unsupported(self, receipts_dir):
        """Unsupported documents raise instead of producing an empty record."""
        with pytest.raises(UnsupportedDocumentError):
            ReceiptProcessor().process_file(receipts_dir / "notes.docx")

    def test_process_batch(self, receipts_dir):
        """Failures are recorded and do not stop the batch."""
        processor = ReceiptProcessor(max_workers=2)
        results = processor.process_batch(receipts_dir)

        assert [r.filename for r in results] == ["a.txt", "b.txt"]
        assert processor.stats == {'total_files': 3, 'processed': 2, 'failed': 1, 'review_items': 2}
        assert processor.audit.get_summary() == {'processed': 1, 'review': 1, 'failed': 1}

        reasons = sorted(item.reason for item in processor.review_queue.items)
        assert reasons[0] == "missing date"
        assert reasons[1].startswith("Processing failed:")

    def test_process_empty_dir(self, tmp_path):
        """An empty folder gives no results."""
        processor = ReceiptProcessor()
        assert processor.process_batch(tmp_path) == []
        assert processor.stats['total_files'] == 0


class TestParseCommand:
    """Test suite for `receipts parse`."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_parse_text(self):
        """--text parses the given string."""
        result = self.runner.invoke(cli, ['parse', '--text', "ACME\nTotal: 1.272"])

        assert result.exit_code == 0
        payload = json_output(result)
        assert payload['filename'] == "<text>"
        assert payload['data']['vendorName'] == "ACME"
        assert payload['data']['amount'] == 1272.0

    def test_parse_file(self, receipts_dir):
        """A text file is routed to the plain text provider."""
        result = self.runner.invoke(cli, ['parse', str(receipts_dir / "a.txt")])

        assert result.exit_code == 0
        payload = json_output(result)
        assert payload['filename'] == "a.txt"
        assert payload['data']['invoiceNumber'] == "INV-2024-001"
        assert payload['data']['rawText'] == SAMPLE_RECEIPT_TEXT

    def test_parse_mock_from_env(self):
        """The provider can be chosen through the environment."""
        result = self.runner.invoke(cli, ['parse'], env={'RECEIPTS_TEXT_PROVIDER': 'mock'})

        assert result.exit_code == 0
        assert json_output(result)['data']['vendorName'] == "SUPERMARKET ABC"

    def test_parse_without_input(self):
        """Without a file, text or mock provider the command is misused."""
        result = self.runner.invoke(cli, ['parse'])
        assert result.exit_code == 2

    def test_parse_unsupported_file(self, receipts_dir):
        """Extraction errors exit with status 1."""
        result = self.runner.invoke(cli, ['parse', str(receipts_dir / "notes.docx")])
        assert result.exit_code == 1

    def test_parse_with_rules(self, tmp_path):
        """A rules file changes the keywords used."""
        rules = tmp_path / "rules.yml"
        rules.write_text("total_keywords: [gesamt]\n", encoding='utf-8')

        result = self.runner.invoke(cli, ['parse', '--rules', str(rules), '--text', "BACKEREI\nGesamt: 5,35\nBar: 10,00"])

        assert result.exit_code == 0
        assert json_output(result)['data']['amount'] == 5.35

    def test_parse_with_invalid_rules(self, tmp_path):
        """Invalid rules are reported as a bad parameter."""
        rules = tmp_path / "rules.yml"
        rules.write_text("totals: [x]\n", encoding='utf-8')

        result = self.runner.invoke(cli, ['parse', '--rules', str(rules), '--text', "x"])
        assert result.exit_code == 2


class TestRunCommand:
    """Test suite for `receipts run`."""

    def test_run_writes_outputs(self, receipts_dir, tmp_path):
        """The batch writes JSON and Excel output and prints the summaries."""
        output_dir = tmp_path / "out"
        runner = CliRunner()
        result = runner.invoke(cli, ['run', '--in', str(receipts_dir), '--out', str(output_dir),
                                     '--max-workers', '2', '--summary'])

        assert result.exit_code == 0
        assert "PROCESSING SUMMARY" in result.stdout
        assert "Failed: 1" in result.stdout
        assert "c.png - failed" in result.stdout

        saved = json.loads((output_dir / "results.json").read_text(encoding='utf-8'))
        assert [r['filename'] for r in saved] == ["a.txt", "b.txt"]
        assert saved[0]['data']['amount'] == 88.00
        assert (output_dir / "receipts.xlsx").exists()

    def test_run_requires_input(self, tmp_path):
        """--in must be an existing folder."""
        result = CliRunner().invoke(cli, ['run', '--in', str(tmp_path / "missing"), '--out', str(tmp_path)])
        assert result.exit_code == 2

"""Command-line interface for receipt text extraction."""

import logging
import click
from pathlib import Path
from typing import List, Dict, Any, Optional
import json
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm
import sys
import threading
from collections import Counter

from .exceptions import ReceiptError
from .export import ExcelExporter
from .keywords import DEFAULT_KEYWORDS, KeywordTables, load_keyword_tables
from .models import ReceiptResult
from .ocr import PROVIDER_NAMES, SUPPORTED_SUFFIXES, get_text_provider
from .parse import ReceiptParser
from .review import ReviewQueue
from .store import ReceiptStore

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


class FileAuditTracker:
    """Track what happens to every file during processing."""

    def __init__(self):
        self.files: Dict[str, Dict[str, Any]] = {}

    def add_file(self, filepath: Path):
        """Register a file found in the input directory."""
        self.files[str(filepath)] = {
            'status': 'found',
            'receipt_id': None,
            'amount': None,
            'reason': None
        }

    def update_file(self, filepath: Path, **kwargs):
        """Update file status with processing results."""
        key = str(filepath)
        if key in self.files:
            self.files[key].update(kwargs)

    def get_summary(self) -> Dict[str, int]:
        """Get summary counts by status."""
        summary = Counter(info['status'] for info in self.files.values())
        return dict(summary)

    def get_missing_files(self) -> List[str]:
        """Get list of files that were not processed successfully."""
        missing = []
        for filepath, info in self.files.items():
            if info['status'] not in ['processed', 'review']:
                missing.append(f"{Path(filepath).name} - {info['status']}: {info.get('reason') or 'unknown'}")
        return missing


class ReceiptProcessor:
    """Turns receipt documents into stored, reviewed ReceiptResults."""

    def __init__(self,
                 provider: str = "auto",
                 keywords: KeywordTables = DEFAULT_KEYWORDS,
                 lang: str = "eng+spa",
                 max_workers: int = 4):
        """
        Initialize the receipt processor.

        Args:
            provider: Text provider name, 'auto' to choose by file suffix
            keywords: Keyword tables for the parser
            lang: Tesseract languages for image OCR
            max_workers: Number of parallel workers
        """
        self.provider = provider
        self.lang = lang
        self.max_workers = max_workers

        self.parser = ReceiptParser(keywords)
        self.store = ReceiptStore()
        self.review_queue = ReviewQueue()
        self.audit = FileAuditTracker()

        self.stats = {
            'total_files': 0,
            'processed': 0,
            'failed': 0,
            'review_items': 0
        }
        self._lock = threading.Lock()

    def find_receipt_files(self, input_dir: Path) -> List[Path]:
        """Find all supported receipt files in the input directory, recursively."""
        logger.info(f"Searching for receipt files in: {input_dir}")

        receipt_files = sorted(
            path for path in input_dir.rglob('*')
            if path.is_file() and (self.provider != 'auto' or path.suffix.lower() in SUPPORTED_SUFFIXES)
        )
        logger.info(f"Found {len(receipt_files)} receipt files in {input_dir}")

        for receipt_file in receipt_files:
            logger.debug(f"  Found: {receipt_file.relative_to(input_dir)}")
            self.audit.add_file(receipt_file)

        return receipt_files

    def process_file(self, receipt_path: Path) -> ReceiptResult:
        """
        Extract, parse and store a single receipt document.

        Args:
            receipt_path: Path to receipt file

        Returns:
            Stored ReceiptResult

        Raises:
            ReceiptError: if the document cannot be turned into text
        """
        provider = get_text_provider(self.provider, receipt_path, lang=self.lang)
        logger.debug(f"Processing {receipt_path.name} with {provider.name} provider")

        text = provider.extract_text(receipt_path)
        data = self.parser.parse(text)
        return self.store.add(receipt_path.name, data)

    def process_single_file(self, receipt_path: Path) -> Optional[ReceiptResult]:
        """Process one file for a batch, recording the outcome instead of raising."""
        try:
            result = self.process_file(receipt_path)
        except ReceiptError as e:
            logger.error(f"Failed to process {receipt_path}: {e}")
            with self._lock:
                self.stats['failed'] += 1
                self.audit.update_file(receipt_path, status='failed', reason=str(e))
                self.review_queue.add_item(
                    file_path=str(receipt_path),
                    reason=f"Processing failed: {e}",
                    raw_snippet=f"Error: {e}"
                )
            return None

        with self._lock:
            needs_review = self.review_queue.add_from_result(result, file_path=str(receipt_path))
            self.audit.update_file(
                receipt_path,
                status='review' if needs_review else 'processed',
                receipt_id=result.id,
                amount=result.data.amount
            )
            self.stats['processed'] += 1
        return result

    def process_batch(self, input_dir: Path) -> List[ReceiptResult]:
        """
        Process all receipt files in the input directory.

        Args:
            input_dir: Directory containing receipt documents

        Returns:
            List of stored results, ordered by file name
        """
        receipt_files = self.find_receipt_files(input_dir)
        self.stats['total_files'] = len(receipt_files)

        if not receipt_files:
            logger.warning("No receipt files found!")
            return []

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {
                executor.submit(self.process_single_file, receipt_file): receipt_file
                for receipt_file in receipt_files
            }

            with tqdm(total=len(receipt_files), desc="Processing receipts") as pbar:
                for future in as_completed(future_to_file):
                    future.result()
                    pbar.update(1)
                    pbar.set_postfix({
                        'processed': self.stats['processed'],
                        'failed': self.stats['failed']
                    })

        self.stats['review_items'] = len(self.review_queue.items)
        logger.info(f"Batch processing complete. Processed: {self.stats['processed']}, "
                    f"Failed: {self.stats['failed']}, Review items: {self.stats['review_items']}")

        return sorted(self.store.list(), key=lambda r: r.filename)


def _load_keywords(rules: Optional[Path]) -> KeywordTables:
    if rules is None:
        return DEFAULT_KEYWORDS
    try:
        return load_keyword_tables(rules)
    except (OSError, ValueError) as e:
        raise click.BadParameter(str(e), param_hint="'--rules'")


def _set_debug(debug: bool):
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


provider_option = click.option(
    '--provider', default='auto', envvar='RECEIPTS_TEXT_PROVIDER', show_default=True,
    type=click.Choice(PROVIDER_NAMES), help='Text provider; auto picks by file suffix')
rules_option = click.option(
    '--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path), envvar='RECEIPTS_RULES',
    help='YAML file overriding the keyword tables')
lang_option = click.option(
    '--lang', default='eng+spa', envvar='RECEIPTS_OCR_LANG', show_default=True,
    help='Tesseract languages for image OCR')
debug_option = click.option('--debug', is_flag=True, help='Enable debug output')


@click.group()
def cli():
    """Receipt OCR text extraction - vendor, date, invoice number and amounts."""
    pass


@cli.command()
@click.argument('file', required=False, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--text', 'raw_text', help='Parse this text instead of reading a file')
@provider_option
@rules_option
@lang_option
@debug_option
def parse(file: Optional[Path], raw_text: Optional[str], provider: str,
          rules: Optional[Path], lang: str, debug: bool):
    """
    Parse one receipt and print the result as JSON.

    Example:
        receipts parse ./receipts/ticket.pdf
    """
    _set_debug(debug)
    keywords = _load_keywords(rules)

    if raw_text is None and file is None and provider != 'mock':
        raise click.UsageError("Give a FILE, --text, or --provider mock")

    store = ReceiptStore()
    parser = ReceiptParser(keywords)

    try:
        if raw_text is not None:
            result = store.add('<text>', parser.parse(raw_text))
        else:
            source = file or Path('mock.txt')
            text = get_text_provider(provider, source, lang=lang).extract_text(source)
            result = store.add(source.name, parser.parse(text))
    except ReceiptError as e:
        logger.error(f"Processing failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


@cli.command()
@click.option('--in', 'input_dir', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Input directory containing receipt documents')
@click.option('--out', 'output_dir', required=True, type=click.Path(file_okay=False, path_type=Path),
              help='Output directory for results')
@click.option('--max-workers', default=4, type=click.IntRange(min=1), envvar='RECEIPTS_MAX_WORKERS',
              show_default=True, help='Maximum number of parallel workers')
@click.option('--summary', is_flag=True, help='Include summary section in Excel output')
@provider_option
@rules_option
@lang_option
@debug_option
def run(input_dir: Path,
        output_dir: Path,
        max_workers: int,
        summary: bool,
        provider: str,
        rules: Optional[Path],
        lang: str,
        debug: bool):
    """
    Process a folder of receipts and write JSON and Excel output.

    Example:
        receipts run --in ./receipts --out ./out --summary
    """
    _set_debug(debug)
    keywords = _load_keywords(rules)

    try:
        output_dir.mkdir(parents=True, exist_ok=True)

        logger.info("Starting receipt processing...")
        logger.info(f"Input directory: {input_dir}")
        logger.info(f"Output directory: {output_dir}")
        logger.info(f"Provider: {provider}, Max workers: {max_workers}")

        processor = ReceiptProcessor(
            provider=provider,
            keywords=keywords,
            lang=lang,
            max_workers=max_workers
        )
        results = processor.process_batch(input_dir)

        json_path = output_dir / 'results.json'
        with open(json_path, 'w', encoding='utf-8') as f:
            json.dump([r.to_dict() for r in results], f, ensure_ascii=False, indent=2)

        excel_path = output_dir / 'receipts.xlsx'
        ExcelExporter(excel_path).export_receipts(
            receipts=results,
            review_items=processor.review_queue.items,
            include_summary=summary
        )
    except (OSError, ReceiptError) as e:
        logger.error(f"Processing failed: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo("\n" + "=" * 50)
    click.echo("PROCESSING SUMMARY")
    click.echo("=" * 50)
    click.echo(f"Total files found: {processor.stats['total_files']}")
    click.echo(f"Successfully processed: {processor.stats['processed']}")
    click.echo(f"Failed: {processor.stats['failed']}")
    click.echo(f"Items needing review: {len(processor.review_queue.items)}")
    click.echo("\nOutput files:")
    click.echo(f"  - JSON: {json_path}")
    click.echo(f"  - Excel: {excel_path}")

    click.echo("\n" + "=" * 50)
    click.echo("FILE PROCESSING AUDIT")
    click.echo("=" * 50)
    for status, count in sorted(processor.audit.get_summary().items()):
        click.echo(f"{status}: {count} files")

    missing_files = processor.audit.get_missing_files()
    if missing_files:
        click.echo(f"\nFILES NOT PROCESSED ({len(missing_files)}):")
        for missing in missing_files[:10]:
            click.echo(f"  - {missing}")
        if len(missing_files) > 10:
            click.echo(f"  ... and {len(missing_files) - 10} more")


if __name__ == '__main__':
    cli()

#!/usr/bin/env python3
# sms-expense-parser/main.py
"""
Command-line interface for parsing and classifying bank SMS transactions
"""

import argparse
import csv
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List

from classifier import TransactionClassifier
from config import get_settings
from models import ClassificationResult, SmsRecord
from parsing_service import TransactionParsingService
from report import income_by_source, spending_by_category
from sample_messages import get_sample_messages
from utils import export_to_excel, generate_statistics, load_sms_from_file, to_local_time

LOG = logging.getLogger(__name__)

DEFAULT_SENDER = "BANK"


def process_records(
        records: List[SmsRecord],
        service: TransactionParsingService,
        classifier: TransactionClassifier,
        args
) -> List[ClassificationResult]:
    """Parse a batch of SMS records and suggest a category for each"""
    parsed = service.parse_inbox(records, since=args.since, limit=args.limit)
    return classifier.classify_batch(parsed)


def save_results(results: List[ClassificationResult], output_path: Path):
    """Save classification results to file"""
    output_data = [r.to_dict() for r in results]

    if output_path.suffix == '.xlsx':
        if not export_to_excel(output_data, output_path):
            LOG.error("openpyxl is required for Excel export")
            return
    elif output_path.suffix == '.csv':
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            if output_data:
                writer = csv.DictWriter(f, fieldnames=output_data[0].keys())
                writer.writeheader()
                writer.writerows(output_data)
    else:
        output_path = output_path.with_suffix('.json')
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2, ensure_ascii=False)

    LOG.info(f"Results saved to {output_path}")


def print_results(results: List[ClassificationResult], verbose: bool = False):
    """Print classification results to console"""
    for r in results:
        t = r.transaction
        if verbose:
            print(f"\nSMS: {t.raw_message}")
            print(f"Type: {t.type.value}")
            print(f"Amount: {t.amount:,.2f}")
            if t.merchant:
                print(f"Merchant: {t.merchant}")
            if t.account_number:
                print(f"Account: XX{t.account_number}")
            if t.balance is not None:
                print(f"Balance: {t.balance:,.2f}")
            print(f"Category: {r.label} [{r.category_confidence:.0%}]")
            print(f"Confidence: {t.confidence:.2%}")
        else:
            merchant = (t.merchant or '-')[:30]
            print(f"{t.date:%Y-%m-%d} {t.type.value:6} {t.amount:>12,.2f}  {merchant:30} "
                  f"-> {r.label} [{t.confidence:.0%}]")


def print_summary(results: List[ClassificationResult]):
    stats = generate_statistics([r.to_dict() for r in results])
    print("\n=== Summary ===")
    print(f"Transactions: {stats['total_transactions']} "
          f"(needs review: {stats['low_confidence']})")
    print(f"Average confidence: {stats['average_confidence']:.1%}")

    spending = spending_by_category(results)
    if not spending.empty:
        print("\nSpending by category:")
        print(spending.to_string(index=False))

    income = income_by_source(results)
    if not income.empty:
        print("\nIncome by source:")
        print(income.to_string(index=False))


def parse_date(value: str) -> datetime:
    try:
        return to_local_time(datetime.fromisoformat(value))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value} (expected YYYY-MM-DD)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Extract and categorize transactions from bank SMS messages'
    )

    # Input options
    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument(
        '-t', '--text',
        help='Single SMS body to parse'
    )
    input_group.add_argument(
        '-f', '--file',
        type=Path,
        help='Inbox export containing SMS messages (JSON, CSV, or TXT)'
    )
    input_group.add_argument(
        '--sample',
        action='store_true',
        help='Parse the bundled sample bank messages'
    )
    input_group.add_argument(
        '--interactive',
        action='store_true',
        help='Interactive mode - enter SMS bodies one by one'
    )

    # Parsing options
    parser.add_argument(
        '--sender',
        default=DEFAULT_SENDER,
        help=f'Sender id for --text, --interactive and TXT input (default: {DEFAULT_SENDER})'
    )
    parser.add_argument(
        '--since',
        type=parse_date,
        help='Only parse messages received after this date (YYYY-MM-DD)'
    )
    parser.add_argument(
        '--limit',
        type=int,
        help='Maximum number of messages to scan'
    )

    # Output options
    parser.add_argument(
        '-o', '--output',
        type=Path,
        help='Output file for results (JSON, CSV or XLSX)'
    )
    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print spending and income summaries'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Verbose output'
    )
    return parser


def main(argv=None):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    args = build_parser().parse_args(argv)

    service = TransactionParsingService(settings)
    classifier = TransactionClassifier()
    results = []

    if args.text:
        record = SmsRecord(args.sender, args.text, "cli_0001", datetime.now())
        results = process_records([record], service, classifier, args)
        if not results:
            LOG.warning("Message is not a recognizable bank transaction")

    elif args.file:
        if not args.file.exists():
            LOG.error(f"File not found: {args.file}")
            sys.exit(1)
        try:
            records = load_sms_from_file(args.file, default_sender=args.sender)
        except ValueError as e:
            LOG.error(str(e))
            sys.exit(1)
        LOG.info(f"Loaded {len(records)} messages from {args.file}")
        results = process_records(records, service, classifier, args)

    elif args.sample:
        results = process_records(get_sample_messages(), service, classifier, args)

    elif args.interactive:
        print("Interactive mode. Type 'quit' to exit.")
        count = 0
        while True:
            try:
                text = input("\nEnter SMS body: ").strip()
                if text.lower() in ['quit', 'exit', 'q']:
                    break
                if text:
                    count += 1
                    record = SmsRecord(args.sender, text, f"cli_{count:04d}", datetime.now())
                    batch = process_records([record], service, classifier, args)
                    if batch:
                        results.extend(batch)
                        print_results(batch, verbose=True)
                    else:
                        print("Not a bank transaction message")
            except (KeyboardInterrupt, EOFError):
                print("\nExiting...")
                break

    # Output results
    if results:
        if not args.interactive:
            print_results(results, verbose=args.verbose)

        if args.output:
            save_results(results, args.output)

        if args.summary or len(results) > 1:
            print_summary(results)

    return 0


if __name__ == "__main__":
    sys.exit(main())

# sms-expense-parser/utils.py
"""
Utility functions for loading SMS dumps and summarizing parse results
"""

import json
import csv
from datetime import datetime
from pathlib import Path
from typing import List, Dict, Any, Optional

from models import SmsRecord

SENDER_FIELDS = ('sender_id', 'sender', 'address', 'from')
BODY_FIELDS = ('body', 'message', 'text', 'sms')
ID_FIELDS = ('sms_id', 'id', '_id', 'message_id')
DATE_FIELDS = ('date', 'timestamp', 'received_at', 'date_sent')

LOW_CONFIDENCE = 0.6


def to_local_time(value: datetime) -> datetime:
    """Naive local time for value (naive datetimes are returned unchanged)"""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_timestamp(value: Any) -> datetime:
    """
    Convert an inbox timestamp into a datetime

    Accepts datetimes, ISO 8601 strings and epoch values in seconds or
    milliseconds (Android inbox exports use milliseconds). Offset-aware
    values are converted to naive local time so every record compares.
    """
    if isinstance(value, datetime):
        return to_local_time(value)
    if isinstance(value, (int, float)) or (isinstance(value, str) and value.strip().isdigit()):
        epoch = float(value)
        if epoch > 1e11:
            epoch /= 1000
        return datetime.fromtimestamp(epoch)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return to_local_time(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported timestamp: {value!r}")


def _first(item: Dict, fields) -> Optional[Any]:
    for field in fields:
        if item.get(field) not in (None, ''):
            return item[field]
    return None


def _record_from_dict(item: Dict, index: int, default_sender: str) -> Optional[SmsRecord]:
    body = _first(item, BODY_FIELDS)
    if body is None:
        return None

    sms_id = _first(item, ID_FIELDS)
    date = _first(item, DATE_FIELDS)
    return SmsRecord(
        sender_id=str(_first(item, SENDER_FIELDS) or default_sender),
        body=str(body),
        sms_id=str(sms_id) if sms_id is not None else f"sms_{index:05d}",
        date=parse_timestamp(date) if date is not None else datetime.now(),
    )


def load_sms_from_file(filepath: Path, default_sender: str = "BANK") -> List[SmsRecord]:
    """
    Load SMS records from an inbox export

    Args:
        filepath: Path to input file (JSON, CSV or TXT)
        default_sender: Sender id for rows that have none (all TXT lines)

    Returns:
        List of SMS records in file order
    """
    records = []

    if filepath.suffix == '.json':
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if isinstance(data, dict):
            data = data.get('messages', [])
        for index, item in enumerate(data):
            if isinstance(item, str):
                item = {'body': item}
            if isinstance(item, dict):
                record = _record_from_dict(item, index, default_sender)
                if record:
                    records.append(record)

    elif filepath.suffix == '.csv':
        with open(filepath, 'r', newline='', encoding='utf-8') as f:
            reader = csv.DictReader(f)
            for index, row in enumerate(reader):
                record = _record_from_dict(row, index, default_sender)
                if record:
                    records.append(record)

    elif filepath.suffix == '.txt':
        with open(filepath, 'r', encoding='utf-8') as f:
            lines = [line.strip() for line in f if line.strip()]
        for index, line in enumerate(lines):
            records.append(_record_from_dict({'body': line}, index, default_sender))

    else:
        raise ValueError(f"Unsupported file type: {filepath.suffix}")

    return records


def generate_statistics(results: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Generate statistics from classification results

    Args:
        results: List of classification result dicts

    Returns:
        Dictionary containing statistics
    """
    total = len(results)
    if total == 0:
        return {}

    type_counts = {}
    label_counts = {}
    confidence_sum = 0
    low_confidence = 0

    for r in results:
        kind = r.get('type', 'unknown')
        type_counts[kind] = type_counts.get(kind, 0) + 1

        label = r.get('category') or r.get('source') or 'other'
        label_counts[label] = label_counts.get(label, 0) + 1

        confidence = r.get('confidence', 0)
        confidence_sum += confidence
        if confidence < LOW_CONFIDENCE:
            low_confidence += 1

    sorted_labels = sorted(
        label_counts.items(),
        key=lambda x: x[1],
        reverse=True
    )

    stats = {
        'total_transactions': total,
        'average_confidence': confidence_sum / total,
        'low_confidence': low_confidence,
        'types': type_counts,
        'categories': {
            label: {
                'count': count,
                'percentage': (count / total) * 100
            }
            for label, count in sorted_labels
        }
    }

    return stats


def export_to_excel(results: List[Dict[str, Any]], filepath: Path):
    """
    Export results to Excel format (requires openpyxl)

    Args:
        results: List of classification result dicts
        filepath: Output Excel file path
    """
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font, PatternFill
    except ImportError:
        return False

    wb = Workbook()
    ws = wb.active
    ws.title = "Transactions"

    headers = ['Date', 'Sender', 'Type', 'Amount', 'Merchant', 'Account',
               'Balance', 'Category', 'Confidence']
    for col, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")

    for row, result in enumerate(results, 2):
        ws.cell(row=row, column=1, value=result.get('date', ''))
        ws.cell(row=row, column=2, value=result.get('sender_id', ''))
        ws.cell(row=row, column=3, value=result.get('type', ''))
        ws.cell(row=row, column=4, value=result.get('amount', 0))
        ws.cell(row=row, column=5, value=result.get('merchant') or '')
        ws.cell(row=row, column=6, value=result.get('account_number') or '')
        ws.cell(row=row, column=7, value=result.get('balance'))
        ws.cell(row=row, column=8, value=result.get('category') or result.get('source') or '')
        ws.cell(row=row, column=9, value=result.get('confidence', 0))

    stats = generate_statistics(results)
    ws2 = wb.create_sheet("Statistics")

    ws2.cell(row=1, column=1, value="Total Transactions")
    ws2.cell(row=1, column=2, value=stats.get('total_transactions', 0))

    ws2.cell(row=2, column=1, value="Average Confidence")
    ws2.cell(row=2, column=2, value=f"{stats.get('average_confidence', 0):.2%}")

    ws2.cell(row=3, column=1, value="Needs Review")
    ws2.cell(row=3, column=2, value=stats.get('low_confidence', 0))

    ws2.cell(row=5, column=1, value="Category")
    ws2.cell(row=5, column=2, value="Count")
    ws2.cell(row=5, column=3, value="Percentage")

    row = 6
    for label, data in stats.get('categories', {}).items():
        ws2.cell(row=row, column=1, value=label)
        ws2.cell(row=row, column=2, value=data['count'])
        ws2.cell(row=row, column=3, value=f"{data['percentage']:.1f}%")
        row += 1

    for sheet in [ws, ws2]:
        for column in sheet.columns:
            max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
            sheet.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    wb.save(filepath)
    return True

# sms-expense-parser/parsing_service.py
"""
Orchestrates SMS parsing across the registered parsers
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set

from config import Settings, get_settings
from models import ParsedTransaction, SmsRecord
from normalize import clean_sender_id
from sms_parser import GenericBankParser, TransactionParser
from utils import to_local_time

LOG = logging.getLogger(__name__)


class TransactionParsingService:
    """
    Runs an SMS through the registered parsers in priority order

    The first parser that accepts the message and returns a result wins.
    Bank-specific parsers belong ahead of the generic one.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._parsers: List[TransactionParser] = [
            GenericBankParser(
                decimal_mark=self.settings.decimal_mark,
                merchant_max_length=self.settings.merchant_max_length,
            )
        ]

    @property
    def registered_parsers(self) -> List[str]:
        return [p.name for p in self._parsers]

    def register(self, parser: TransactionParser, first: bool = True):
        """Add a parser, ahead of the existing ones unless first is False"""
        if first:
            self._parsers.insert(0, parser)
        else:
            self._parsers.append(parser)

    def is_likely_bank_sms(self, sender_id: str, body: str) -> bool:
        sender = clean_sender_id(sender_id)
        return any(p.can_parse(sender, body) for p in self._parsers)

    def parse(
            self,
            sender_id: str,
            body: str,
            sms_id: str,
            date: datetime
    ) -> Optional[ParsedTransaction]:
        """
        Parse a single SMS with the first parser that succeeds

        The sender id handed to parsers (and kept on the result) has its
        operator prefix removed, e.g. "VM-HDFCBK" becomes "HDFCBK".
        """
        sender = clean_sender_id(sender_id)
        for parser in self._parsers:
            if not parser.can_parse(sender, body):
                continue
            result = parser.parse(sender, body, sms_id, date)
            if result is not None:
                return result
        return None

    def parse_record(self, record: SmsRecord) -> Optional[ParsedTransaction]:
        return self.parse(record.sender_id, record.body, record.sms_id, record.date)

    def parse_inbox(
            self,
            records: Iterable[SmsRecord],
            since: Optional[datetime] = None,
            limit: Optional[int] = None,
            seen_ids: Optional[Set[str]] = None
    ) -> List[ParsedTransaction]:
        """
        Parse a batch of inbox messages

        Args:
            records: SMS records in any order
            since: Only consider messages received after this time
            limit: Maximum number of messages to scan (defaults to settings)
            seen_ids: SMS ids imported earlier; these are skipped

        Returns:
            Parsed transactions in chronological order, one per SMS id
        """
        limit = self.settings.scan_limit if limit is None else limit
        seen = set(seen_ids or ())
        if since is not None:
            since = to_local_time(since)
        parsed = []
        scanned = 0

        for record in records:
            if scanned >= limit:
                break
            scanned += 1

            if record.sms_id in seen:
                continue
            if since is not None and to_local_time(record.date) <= since:
                continue
            seen.add(record.sms_id)

            result = self.parse_record(record)
            if result is not None:
                parsed.append(result)

        parsed.sort(key=lambda t: to_local_time(t.date))
        LOG.info(f"Parsed {len(parsed)} transactions from {scanned} messages")
        return parsed

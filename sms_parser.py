# sms-expense-parser/sms_parser.py
"""
Rule-based extraction of transactions from bank SMS notifications
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Tuple

from models import ParsedTransaction, TransactionType
from normalize import first_keyword, normalize_text, parse_amount

LOG = logging.getLogger(__name__)

# Fragments of sender ids used by banks, card issuers and wallets
BANK_SENDER_PATTERNS = (
    # Major banks
    "HDFC", "ICICI", "SBI", "AXIS", "KOTAK", "IDFC", "INDUS", "YES", "PNB",
    "BOB", "CANARA", "UNION", "FEDERAL", "FEDBK", "RBL", "AUBANK", "AUCC",
    # International banks
    "AMEX", "CITI", "HSBC", "SCB", "DBS",
    # Fintech and cards
    "ONECARD", "SLICE", "JUPITER", "FIMONY", "NIYO",
    # Wallets and UPI apps
    "PAYTM", "GPAY", "PHONEPE", "AMAZONPAY", "MOBIKWIK", "FREECHARGE",
    # Generic bank ids
    "BANK", "BNK",
)

STRONG_DEBIT_KEYWORDS = (
    "debited", "spent", "paid", "withdrawn", "deducted", "sent",
    "transferred", "charged",
)
STRONG_CREDIT_KEYWORDS = (
    "credited", "received", "deposited", "refunded", "reversed",
)
WEAK_DEBIT_KEYWORDS = (
    "debit", "payment", "purchase", "txn", "bill payment", "card transaction",
    "transaction of rs", "autopay", "emi",
)
WEAK_CREDIT_KEYWORDS = (
    "credit", "refund", "cashback", "reversal",
)
OTP_KEYWORDS = ("otp", "one time password", "verification code")

# Confidence weights; every extracted cue only ever adds
BASE_CONFIDENCE = 0.40
STRONG_KEYWORD_BONUS = 0.10
UNAMBIGUOUS_AMOUNT_BONUS = 0.10
ACCOUNT_BONUS = 0.15
MERCHANT_BONUS = 0.15
BALANCE_BONUS = 0.10

_NUMBER = r"(\d(?:[\d,.]*\d)?)"
_CURRENCY = r"(?:rs\.?|inr|₹)"

AMOUNT_PREFIX_RE = re.compile(rf"(?<![a-z]){_CURRENCY}\s*{_NUMBER}", re.IGNORECASE)
AMOUNT_SUFFIX_RE = re.compile(rf"(?<![\d.,]){_NUMBER}\s*(?:inr\b|rupees\b|/-)", re.IGNORECASE)
AMOUNT_FALLBACK_RE = re.compile(
    r"\b(?:amt|amount)\b[\s:.]*(?:of\s+)?(\d[\d,]{2,}(?:\.\d{1,2})?)",
    re.IGNORECASE,
)

BALANCE_RE = re.compile(
    r"(?:\bavl\.?\s*bal(?:ance)?|\bavail(?:able)?\.?\s*bal(?:ance)?|\bbal(?:ance)?)\b"
    rf"[\s:.\-]*(?:is\s*)?(?:{_CURRENCY}\s*)?{_NUMBER}",
    re.IGNORECASE,
)

ACCOUNT_RE = re.compile(
    r"(?:\ba/?c\b|\bacct\b|\baccount\b|\bcard\b|\bending\b)[\s:.]*"
    r"(?:no\.?\s*)?(?:ending\s*(?:with\s*)?)?[x*#]*\s*(\d{3,})",
    re.IGNORECASE,
)
MASKED_ACCOUNT_RE = re.compile(r"(?<![a-z0-9])(?:x{2,}|\*{2,})(\d{3,})", re.IGNORECASE)

REFERENCE_RE = re.compile(
    r"(?:\bupi\s*ref(?:\s*no\.?)?|\bref(?:erence)?\b\.?\s*(?:no\.?|id|#)?|\butr\b(?:\s*no\.?)?|\btxn\s*id)"
    r"[\s:.\-#]*([a-z0-9]*\d[a-z0-9]{5,})",
    re.IGNORECASE,
)

# Merchant name, cut lazily at the first terminator
_NAME = r"([a-z][a-z0-9&'@._\-/* ]*?)"
_TERMINATOR = (
    r"(?=\s+(?:on|at|via|using|ref|avl|avail|bal|balance|info|upi|is|from|with|for)\b"
    r"|[.,;:!()](?:\s|$)|\s+-\s|\s*\n|\s+\d{1,2}[-/ ]|$)"
)

# Ordered delimiter patterns; the first acceptable candidate wins
MERCHANT_PATTERNS = (
    re.compile(r"\bto\s+(?:vpa\s+)?([a-z0-9][a-z0-9._\-]*@[a-z][a-z0-9.]*)", re.IGNORECASE),
    re.compile(rf"\b(?:paid|sent|transferred)\s+to\s+(?:vpa\s+)?{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(r"\binfo\s*:?\s*(?:upi|imps|neft|pos|ach)[-/]([a-z][a-z0-9 &.]*?)(?=[-/@]|\.\s|\s*$)", re.IGNORECASE),
    re.compile(rf"\bat\s+{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"\btowards\s+{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"\bto\s+(?:vpa\s+)?{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"\bfor\s+{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"\bon\s+{_NAME}\s+is\s+successful", re.IGNORECASE),
    re.compile(rf"\bby\s+{_NAME}{_TERMINATOR}", re.IGNORECASE),
    re.compile(rf"\bfrom\s+{_NAME}{_TERMINATOR}", re.IGNORECASE),
)

# First words that point at the user's own account rather than a payee
MERCHANT_REJECT_WORDS = {
    "your", "you", "a/c", "ac", "acct", "account", "card", "upi", "the",
    "rs", "rs.", "inr", "a", "an", "txn", "transaction", "purchase",
    "payment", "beneficiary", "self",
}
_REFERENCE_TOKEN_RE = re.compile(r"\d{5,}")
_TRAILING_NOISE = " .,;:-*/'"


class TransactionParser(ABC):
    """
    Base class for bank SMS parsers

    Parsers are tried in registration order until one of them returns a
    result, so bank-specific parsers should be registered ahead of generic
    ones.
    """

    name = "base"

    @abstractmethod
    def can_parse(self, sender_id: str, body: str) -> bool:
        """Cheap check whether this parser should attempt the message"""

    @abstractmethod
    def parse(
            self,
            sender_id: str,
            body: str,
            sms_id: str,
            date: datetime
    ) -> Optional[ParsedTransaction]:
        """Extract a transaction, or return None when the SMS is not one"""


class GenericBankParser(TransactionParser):
    """
    Parser for the common Indian bank SMS layout

    Handles the formats shared by most banks and wallets:
    - Amounts: Rs.500.00, INR 1,500, ₹25,000.50, 1,500/-
    - Accounts: A/c XX1234, card **1234, account ending 1234
    - Directions: debited/spent/paid vs credited/received/deposited
    """

    name = "Generic Indian Bank"

    def __init__(self, decimal_mark: str = ".", merchant_max_length: int = 40):
        self.decimal_mark = decimal_mark
        self.merchant_max_length = merchant_max_length

    def can_parse(self, sender_id: str, body: str) -> bool:
        if sender_id is None or body is None:
            raise TypeError("sender_id and body are required")

        upper_sender = sender_id.upper()
        if not any(pattern in upper_sender for pattern in BANK_SENDER_PATTERNS):
            return False

        text = self._prepare(body)
        if not text:
            return False
        if first_keyword(text, OTP_KEYWORDS, whole_word=True):
            return False
        if self._detect_direction(text) is None:
            return False

        amount, _ = self._extract_amount(body)
        return amount is not None

    def parse(
            self,
            sender_id: str,
            body: str,
            sms_id: str,
            date: datetime
    ) -> Optional[ParsedTransaction]:
        if sms_id is None or date is None:
            raise TypeError("sms_id and date are required")

        if not self.can_parse(sender_id, body):
            LOG.debug(f"Skipping SMS {sms_id}: not a transaction message")
            return None

        amount, unambiguous = self._extract_amount(body)
        if amount is None:
            LOG.debug(f"Skipping SMS {sms_id}: no positive amount")
            return None

        direction = self._detect_direction(self._prepare(body))
        if direction is None:
            LOG.debug(f"Skipping SMS {sms_id}: ambiguous direction")
            return None
        transaction_type, strong = direction

        account_number = self._extract_account(body)
        merchant = self._extract_merchant(body)
        balance = self._extract_balance(body)
        reference_number = self._extract_reference(body)

        confidence = self.score(
            strong_keyword=strong,
            unambiguous_amount=unambiguous,
            has_account=account_number is not None,
            has_merchant=merchant is not None,
            has_balance=balance is not None,
        )

        return ParsedTransaction(
            type=transaction_type,
            amount=amount,
            date=date,
            raw_message=body,
            sender_id=sender_id,
            sms_id=sms_id,
            merchant=merchant,
            account_number=account_number,
            reference_number=reference_number,
            balance=balance,
            confidence=confidence,
        )

    @staticmethod
    def score(
            strong_keyword: bool = False,
            unambiguous_amount: bool = False,
            has_account: bool = False,
            has_merchant: bool = False,
            has_balance: bool = False
    ) -> float:
        """Confidence from the structural cues that were matched"""
        confidence = BASE_CONFIDENCE
        if strong_keyword:
            confidence += STRONG_KEYWORD_BONUS
        if unambiguous_amount:
            confidence += UNAMBIGUOUS_AMOUNT_BONUS
        if has_account:
            confidence += ACCOUNT_BONUS
        if has_merchant:
            confidence += MERCHANT_BONUS
        if has_balance:
            confidence += BALANCE_BONUS
        return round(min(max(confidence, 0.0), 1.0), 2)

    @staticmethod
    def _prepare(body: str) -> str:
        # A "credit card" spend is not credit evidence
        return normalize_text(body).replace("credit card", "card")

    @staticmethod
    def _detect_direction(text: str) -> Optional[Tuple[TransactionType, bool]]:
        """
        Decide debit/credit from keyword evidence

        Strong verbs beat weak cues; at equal strength debit wins, since a
        missed expense costs more than a misread credit.

        Returns:
            (type, strong) or None when neither vocabulary is present
        """
        if first_keyword(text, STRONG_DEBIT_KEYWORDS, whole_word=True):
            return TransactionType.DEBIT, True
        if first_keyword(text, STRONG_CREDIT_KEYWORDS, whole_word=True):
            return TransactionType.CREDIT, True
        if first_keyword(text, WEAK_DEBIT_KEYWORDS, whole_word=True):
            return TransactionType.DEBIT, False
        if first_keyword(text, WEAK_CREDIT_KEYWORDS, whole_word=True):
            return TransactionType.CREDIT, False
        return None

    def _extract_amount(self, body: str) -> Tuple[Optional[float], bool]:
        """
        Find the transaction amount, skipping amounts that belong to a
        balance phrase

        Returns:
            (amount, unambiguous) where unambiguous means currency-marked
        """
        balance_spans = [m.span() for m in BALANCE_RE.finditer(body)]

        def outside_balance(match) -> bool:
            return not any(start <= match.start() < end for start, end in balance_spans)

        for regex, unambiguous in (
                (AMOUNT_PREFIX_RE, True),
                (AMOUNT_SUFFIX_RE, True),
                (AMOUNT_FALLBACK_RE, False),
        ):
            for match in regex.finditer(body):
                if outside_balance(match):
                    amount = parse_amount(match.group(1), self.decimal_mark)
                    return amount, unambiguous and amount is not None
        return None, False

    def _extract_balance(self, body: str) -> Optional[float]:
        match = BALANCE_RE.search(body)
        if match is None:
            return None
        return parse_amount(match.group(1), self.decimal_mark, positive=False)

    @staticmethod
    def _extract_account(body: str) -> Optional[str]:
        match = ACCOUNT_RE.search(body) or MASKED_ACCOUNT_RE.search(body)
        if match is None:
            return None
        return match.group(1)[-4:]

    @staticmethod
    def _extract_reference(body: str) -> Optional[str]:
        match = REFERENCE_RE.search(body)
        return match.group(1).upper() if match else None

    def _extract_merchant(self, body: str) -> Optional[str]:
        for pattern in MERCHANT_PATTERNS:
            for match in pattern.finditer(body):
                merchant = self._clean_merchant_name(match.group(1))
                if merchant:
                    return merchant
        return None

    def _clean_merchant_name(self, name: str) -> Optional[str]:
        """Drop reference tokens and noise, cap length, title-case shouting"""
        tokens = [t for t in name.split() if not _REFERENCE_TOKEN_RE.search(t)]
        if tokens and tokens[0].lower() == "vpa":
            tokens = tokens[1:]
        if not tokens or tokens[0].lower().strip(_TRAILING_NOISE) in MERCHANT_REJECT_WORDS:
            return None

        cleaned = " ".join(tokens).strip(_TRAILING_NOISE)
        if len(cleaned) > self.merchant_max_length:
            cut = cleaned[:self.merchant_max_length]
            cleaned = (cut.rsplit(" ", 1)[0] if " " in cut else cut).strip(_TRAILING_NOISE)
        if len(cleaned) < 2:
            return None

        if cleaned.isupper():
            cleaned = " ".join(word.capitalize() for word in cleaned.split(" "))
        return cleaned

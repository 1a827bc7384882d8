# sms-expense-parser/classifier.py
"""
Keyword-based category and income source classification for parsed transactions
"""

import logging
from typing import List, Optional, Sequence, Tuple

from models import (
    CATEGORY_RULES,
    SOURCE_RULES,
    ClassificationResult,
    ExpenseCategory,
    IncomeSource,
    ParsedTransaction,
)
from normalize import SHORT_KEYWORD_LENGTH, contains_keyword, keyword_position, normalize_text

LOG = logging.getLogger(__name__)


def _starts_with(text: str, keyword: str) -> bool:
    if len(keyword) <= SHORT_KEYWORD_LENGTH:
        return keyword_position(text, keyword) == 0
    return text.startswith(keyword)


class _RuleClassifier:
    """Ordered first-match-wins keyword rules with a default bucket"""

    def __init__(self, rules: Sequence[Tuple], default):
        self.rules = list(rules)
        self.default = default

    def classify(self, text: Optional[str]):
        """
        Map merchant or message text to the first matching rule's label

        Args:
            text: Merchant name or other free text (None is allowed)

        Returns:
            The label of the first rule with a matching keyword, or the
            default label when the text is empty or nothing matches
        """
        normalized = normalize_text(text)
        if not normalized:
            return self.default

        matched = self._apply_rules(normalized)
        return matched if matched is not None else self.default

    def get_confidence(self, text: Optional[str], label) -> float:
        """
        Score how strongly the text supports a label

        1.0 when a keyword is the whole text, 0.9 when the text starts
        with one, 0.7 when a keyword only appears somewhere inside it.
        """
        normalized = normalize_text(text)
        if not normalized:
            return 0.0
        if label == self.default:
            return 0.3

        keywords = [kw for rule_label, kws in self.rules if rule_label == label for kw in kws]
        if any(normalized == kw for kw in keywords):
            return 1.0
        if any(_starts_with(normalized, kw) for kw in keywords):
            return 0.9
        if any(contains_keyword(normalized, kw) for kw in keywords):
            return 0.7
        return 0.3

    def classify_batch(self, texts: List[Optional[str]]) -> list:
        return [self.classify(text) for text in texts]

    def _apply_rules(self, text: str):
        for label, keywords in self.rules:
            if any(contains_keyword(text, keyword) for keyword in keywords):
                return label
        return None


class CategoryClassifier(_RuleClassifier):
    """Suggests an expense category for a debit from the merchant name"""

    def __init__(self, rules: Optional[Sequence[Tuple[ExpenseCategory, Tuple[str, ...]]]] = None):
        super().__init__(rules if rules is not None else CATEGORY_RULES, ExpenseCategory.OTHER)


class IncomeSourceClassifier(_RuleClassifier):
    """Suggests an income source for a credit from merchant or message text"""

    def __init__(self, rules: Optional[Sequence[Tuple[IncomeSource, Tuple[str, ...]]]] = None):
        super().__init__(rules if rules is not None else SOURCE_RULES, IncomeSource.OTHER)


class TransactionClassifier:
    """Routes debits to the category rules and credits to the source rules"""

    def __init__(
            self,
            categories: Optional[CategoryClassifier] = None,
            sources: Optional[IncomeSourceClassifier] = None
    ):
        self.categories = categories or CategoryClassifier()
        self.sources = sources or IncomeSourceClassifier()

    def classify(self, transaction: ParsedTransaction) -> ClassificationResult:
        """
        Suggest a category (debit) or income source (credit)

        Credits often carry no payee, so the source rules fall back to the
        message body and then the sender id.
        """
        if transaction.is_debit:
            category = self.categories.classify(transaction.merchant)
            return ClassificationResult(
                transaction=transaction,
                category=category,
                category_confidence=self.categories.get_confidence(transaction.merchant, category),
            )

        text = transaction.merchant
        source = self.sources.classify(text)
        for fallback in (transaction.raw_message, transaction.sender_id):
            if source != IncomeSource.OTHER:
                break
            text = fallback
            source = self.sources.classify(text)

        return ClassificationResult(
            transaction=transaction,
            source=source,
            category_confidence=self.sources.get_confidence(text, source),
        )

    def classify_batch(self, transactions: List[ParsedTransaction]) -> List[ClassificationResult]:
        results = [self.classify(t) for t in transactions]
        LOG.debug(f"Classified {len(results)} transactions")
        return results

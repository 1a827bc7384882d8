from datetime import datetime

import pytest

from classifier import TransactionClassifier
from models import ParsedTransaction, TransactionType
from report import income_by_source, results_to_frame, spending_by_category


def make_result(kind, amount, merchant, body=""):
    transaction = ParsedTransaction(
        type=kind, amount=amount, date=datetime(2026, 2, 4), raw_message=body,
        sender_id="HDFCBK", sms_id=f"{merchant}-{amount}", merchant=merchant,
    )
    return TransactionClassifier().classify(transaction)


@pytest.fixture
def results():
    return [
        make_result(TransactionType.DEBIT, 300.0, "Zomato"),
        make_result(TransactionType.DEBIT, 200.0, "Starbucks"),
        make_result(TransactionType.DEBIT, 1500.0, "Amazon India"),
        make_result(TransactionType.CREDIT, 50000.0, None, "NEFT SALARY credited"),
        make_result(TransactionType.CREDIT, 599.0, None, "REFUND-AMAZON credited"),
    ]


def test_results_to_frame(results):
    df = results_to_frame(results)

    assert len(df) == 5
    assert list(df['label']) == ['food', 'food', 'shopping', 'salary', 'refund']


def test_spending_by_category(results):
    summary = spending_by_category(results)

    assert list(summary['name']) == ['shopping', 'food']
    assert list(summary['amount']) == [1500.0, 500.0]
    assert list(summary['count']) == [1, 2]
    assert summary['percentage'].sum() == pytest.approx(100.0)


def test_income_by_source(results):
    summary = income_by_source(results)

    assert list(summary['name']) == ['salary', 'refund']
    assert summary.loc[0, 'percentage'] == pytest.approx(50000 / 50599 * 100, abs=0.01)


def test_empty_summaries():
    assert spending_by_category([]).empty
    assert income_by_source([make_result(TransactionType.DEBIT, 10.0, "Uber")]).empty

from datetime import datetime
from itertools import product

import pytest

from models import TransactionType
from sample_messages import get_sample_messages
from sms_parser import GenericBankParser

HDFC = "VM-HDFCBK"


def test_scenario_debit_with_all_fields(parser, sms_date):
    body = "Rs.500.00 debited from A/c XX1234 on 04-Feb-26 at Starbucks. Avl bal Rs.12,340.50"

    result = parser.parse(HDFC, body, "sms-a", sms_date)

    assert result is not None
    assert result.type == TransactionType.DEBIT
    assert result.amount == pytest.approx(500.0)
    assert result.merchant == "Starbucks"
    assert result.account_number == "1234"
    assert result.balance == pytest.approx(12340.50)
    assert result.confidence == pytest.approx(1.0)


def test_scenario_salary_credit(parser, sms_date):
    body = "INR 25,000 credited to your account ending 7890 - Salary"

    result = parser.parse("AD-SBIINB", body, "sms-b", sms_date)

    assert result is not None
    assert result.type == TransactionType.CREDIT
    assert result.amount == pytest.approx(25000.0)
    assert result.account_number == "7890"
    assert result.merchant is None
    assert result.balance is None
    assert result.confidence >= 0.7


def test_scenario_promotion_is_rejected(parser, sms_date):
    body = "Get 50% off on your next Amazon order! Use code SAVE50"

    assert parser.can_parse(HDFC, body) is False
    assert parser.parse(HDFC, body, "sms-c", sms_date) is None


def test_scenario_transaction_amount_not_balance(parser, sms_date):
    body = "Rs.1,200 spent at Reliance Store. Avail bal Rs.45,000"

    result = parser.parse(HDFC, body, "sms-d", sms_date)

    assert result.amount == pytest.approx(1200.0)
    assert result.balance == pytest.approx(45000.0)
    assert result.merchant == "Reliance Store"


def test_balance_listed_first_is_still_skipped(parser, sms_date):
    body = "Avl Bal Rs.9,000.00 after Rs.250 debited from A/c XX1111"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.amount == pytest.approx(250.0)
    assert result.balance == pytest.approx(9000.0)


def test_zero_balance_is_kept(parser, sms_date):
    body = "Rs.500.00 debited from A/c XX1234 at Starbucks. Avl bal Rs.0.00"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.amount == pytest.approx(500.0)
    assert result.balance == 0.0
    assert result.confidence == pytest.approx(1.0)


def test_sample_messages_round_through_parser():
    parser = GenericBankParser()
    parsed_count = 0

    for record in get_sample_messages():
        if not parser.can_parse(record.sender_id, record.body):
            continue

        result = parser.parse(record.sender_id, record.body, record.sms_id, record.date)

        assert result is not None, record.sms_id
        assert result.sms_id == record.sms_id
        assert result.sender_id == record.sender_id
        assert result.date == record.date
        assert result.amount > 0
        assert 0.0 <= result.confidence <= 1.0
        parsed_count += 1

    assert parsed_count == 15


@pytest.mark.parametrize("sms_id, merchant", [
    ("sample_001", "Swiggy"),
    ("sample_002", "Amazon India"),
    ("sample_004", "gpay-zomato@okaxis"),
    ("sample_005", "Netflix.com"),
    ("sample_007", "Uber India"),
    ("sample_009", "bigbasket@upi"),
    ("sample_010", "Starbucks India"),
    ("sample_013", "Latspace Technologies Private Limit"),
    ("sample_014", "Master KRISHNA TEJAS"),
    ("sample_015", "Upahara darshini"),
])
def test_merchant_extraction(parser, sms_id, merchant):
    record = next(r for r in get_sample_messages() if r.sms_id == sms_id)

    result = parser.parse(record.sender_id, record.body, record.sms_id, record.date)

    assert result.merchant == merchant


@pytest.mark.parametrize("sms_id, account", [
    ("sample_002", "7834"),
    ("sample_004", "4521"),
    ("sample_008", "4521"),
    ("sample_011", "1234"),
    ("sample_013", "2062"),
    ("sample_014", "2062"),
])
def test_account_suffix_extraction(parser, sms_id, account):
    record = next(r for r in get_sample_messages() if r.sms_id == sms_id)

    result = parser.parse(record.sender_id, record.body, record.sms_id, record.date)

    assert result.account_number == account


def test_reference_number(parser, sms_date):
    body = "Paid Rs.320 to STARBUCKS INDIA using Google Pay. UPI Ref: 401234567892"

    result = parser.parse("BT-GPAY", body, "sms", sms_date)

    assert result.reference_number == "401234567892"


def test_lakh_grouped_balance(parser, sms_date):
    body = ("INR 3,500.00 spent on your ICICI Bank Card XX7834 on 20-Jan-24 at AMAZON INDIA. "
            "Avl Bal: INR 1,25,000.00")

    result = parser.parse("VM-ICICIB", body, "sms", sms_date)

    assert result.balance == pytest.approx(125000.0)


def test_otp_message_is_rejected(parser, sms_date):
    body = "123456 is your OTP for txn of Rs 2,000 at AMAZON. Do not share it with anyone."

    assert parser.can_parse(HDFC, body) is False
    assert parser.parse(HDFC, body, "otp", sms_date) is None


def test_unknown_sender_is_rejected(parser, sms_date):
    body = "Rs.500.00 debited from A/c XX1234"

    assert parser.can_parse("JM-FRIEND", body) is False
    assert parser.parse("JM-FRIEND", body, "sms", sms_date) is None


def test_no_keyword_means_no_transaction(parser, sms_date):
    body = "Your statement for A/c XX1234 is ready. Total due Rs.4,500"

    assert parser.parse(HDFC, body, "sms", sms_date) is None


def test_zero_amount_returns_none(parser, sms_date):
    body = "Rs.0.00 debited from A/c XX1234 on 04-Feb-26"

    assert parser.can_parse(HDFC, body) is False
    assert parser.parse(HDFC, body, "sms", sms_date) is None


def test_balance_only_message_returns_none(parser, sms_date):
    body = "Salary credited soon. Avl bal Rs.12,000"

    assert parser.parse(HDFC, body, "sms", sms_date) is None


def test_empty_body(parser, sms_date):
    assert parser.can_parse(HDFC, "") is False
    assert parser.parse(HDFC, "", "sms", sms_date) is None


def test_strong_debit_beats_strong_credit(parser, sms_date):
    body = "Rs.2,000 debited from A/c XX1234 and credited to beneficiary RAHUL"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.type == TransactionType.DEBIT


def test_strong_credit_beats_weak_debit(parser, sms_date):
    body = "Refund of Rs.799 for your payment at MYNTRA has been credited to A/c XX1234"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.type == TransactionType.CREDIT


def test_weak_debit_beats_weak_credit(parser, sms_date):
    body = "Card transaction of Rs.300 at CAFE COFFEE DAY eligible for cashback"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.type == TransactionType.DEBIT


def test_refund_is_classified_by_its_own_keywords(parser, sms_date):
    body = "Rs.599.00 credited to A/c XX4521 on 12-01-24. Info: REFUND-AMAZON."

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.type == TransactionType.CREDIT


def test_credit_card_spend_is_debit(parser, sms_date):
    body = "Your slice credit card transaction of Rs. 110 on Upahara darshini is successful."

    result = parser.parse("VM-SLICE-S", body, "sms", sms_date)

    assert result.type == TransactionType.DEBIT
    assert result.amount == pytest.approx(110.0)


def test_weak_keyword_lowers_confidence(parser, sms_date):
    strong = parser.parse(HDFC, "Rs.300 debited at CAFE DAY", "s1", sms_date)
    weak = parser.parse(HDFC, "Card transaction of Rs.300 at CAFE DAY", "s2", sms_date)

    assert strong.confidence > weak.confidence


def test_amount_after_amt_keyword_is_ambiguous(parser, sms_date):
    result = parser.parse(HDFC, "Amt 1500.00 debited from A/c XX1234", "sms", sms_date)

    assert result.amount == pytest.approx(1500.0)
    assert result.confidence == pytest.approx(GenericBankParser.score(
        strong_keyword=True, has_account=True))


def test_suffix_currency(parser, sms_date):
    result = parser.parse(HDFC, "1,500/- debited from A/c XX1234", "sms", sms_date)

    assert result.amount == pytest.approx(1500.0)


def test_comma_decimal_convention(sms_date):
    parser = GenericBankParser(decimal_mark=",")
    body = "INR 1.234,56 debited from A/c XX1234. Avl bal INR 10.000,00"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert result.amount == pytest.approx(1234.56)
    assert result.balance == pytest.approx(10000.0)


def test_merchant_length_is_capped(sms_date):
    parser = GenericBankParser(merchant_max_length=20)
    body = "Rs.500 spent at SUPER LONG MERCHANT NAME PRIVATE LIMITED on 04-Feb-26"

    result = parser.parse(HDFC, body, "sms", sms_date)

    assert len(result.merchant) <= 20
    assert result.merchant == "Super Long Merchant"


def test_reference_tokens_dropped_from_merchant(parser, sms_date):
    result = parser.parse(HDFC, "Rs.75 paid to CHAI POINT 40123456789", "sms", sms_date)

    assert result.merchant == "Chai Point"


def test_via_names_the_channel_not_the_merchant(parser, sms_date):
    paid = parser.parse(HDFC, "Rs.89 paid to DOMINOS PIZZA via PhonePe", "sms-1", sms_date)
    channel_only = parser.parse(HDFC, "Rs.250 debited via NetBanking. Avl bal Rs.1,000", "sms-2", sms_date)

    assert paid.merchant == "Dominos Pizza"
    assert channel_only.merchant is None


def test_confidence_is_monotonic():
    flags = list(product([False, True], repeat=5))
    scores = {f: GenericBankParser.score(*f) for f in flags}

    for fewer in flags:
        for more in flags:
            if all(m or not f for f, m in zip(fewer, more)):
                assert scores[fewer] <= scores[more]
    assert all(0.0 <= s <= 1.0 for s in scores.values())
    assert scores[(True,) * 5] == pytest.approx(1.0)


def test_parse_is_deterministic(parser, sms_date):
    body = "Rs.1,200 spent at Reliance Store. Avail bal Rs.45,000"

    assert parser.parse(HDFC, body, "x", sms_date) == parser.parse(HDFC, body, "x", sms_date)


@pytest.mark.parametrize("args", [
    (None, "Rs.500 debited", "id", datetime(2026, 1, 1)),
    (HDFC, None, "id", datetime(2026, 1, 1)),
    (HDFC, "Rs.500 debited", None, datetime(2026, 1, 1)),
    (HDFC, "Rs.500 debited", "id", None),
])
def test_missing_arguments_fail_loudly(parser, args):
    with pytest.raises(TypeError):
        parser.parse(*args)

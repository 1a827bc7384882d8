# sms-expense-parser/models.py
"""
Data models and keyword rule tables for bank SMS parsing and classification
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List, Tuple


class TransactionType(str, Enum):
    DEBIT = "debit"
    CREDIT = "credit"


class ExpenseCategory(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    HEALTH = "health"
    EDUCATION = "education"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _CATEGORY_NAMES[self]


class IncomeSource(str, Enum):
    SALARY = "salary"
    FREELANCE = "freelance"
    BUSINESS = "business"
    INVESTMENT = "investment"
    GIFT = "gift"
    REFUND = "refund"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        return _SOURCE_NAMES[self]


_CATEGORY_NAMES = {
    ExpenseCategory.FOOD: "Food & Dining",
    ExpenseCategory.TRANSPORT: "Transport",
    ExpenseCategory.SHOPPING: "Shopping",
    ExpenseCategory.ENTERTAINMENT: "Entertainment",
    ExpenseCategory.BILLS: "Bills & Utilities",
    ExpenseCategory.HEALTH: "Health",
    ExpenseCategory.EDUCATION: "Education",
    ExpenseCategory.OTHER: "Other",
}

_SOURCE_NAMES = {
    IncomeSource.SALARY: "Salary",
    IncomeSource.FREELANCE: "Freelance Income",
    IncomeSource.BUSINESS: "Business Income",
    IncomeSource.INVESTMENT: "Investment Returns",
    IncomeSource.GIFT: "Gift",
    IncomeSource.REFUND: "Refund",
    IncomeSource.OTHER: "Other",
}


# Ordered (category, keywords) rules. First matching rule wins, so a
# merchant hitting several keyword sets resolves to the earliest rule.
# Keywords of four characters or fewer only match whole words.
CATEGORY_RULES: List[Tuple[ExpenseCategory, Tuple[str, ...]]] = [
    # Streaming subscriptions sold by shopping brands
    (ExpenseCategory.ENTERTAINMENT, (
        "amazon prime", "prime video", "youtube premium", "apple music",
    )),
    (ExpenseCategory.FOOD, (
        "swiggy", "zomato", "dominos", "pizza", "mcdonalds", "kfc", "burger",
        "restaurant", "cafe", "coffee", "starbucks", "dunkin", "food",
        "kitchen", "biryani", "dine", "eat", "meal", "subway", "wendys",
        "taco", "noodles", "sushi", "bakery",
    )),
    (ExpenseCategory.TRANSPORT, (
        "uber", "ola", "rapido", "metro", "irctc", "railway", "petrol",
        "fuel", "diesel", "parking", "toll", "fastag", "redbus", "bus", "cab",
        "taxi", "auto", "makemytrip", "goibibo", "cleartrip", "yatra",
    )),
    # Medical merchants before shopping so "pharmacy store" stays health
    (ExpenseCategory.HEALTH, (
        "pharmacy", "chemist", "medical", "hospital", "clinic", "diagnostic",
    )),
    (ExpenseCategory.SHOPPING, (
        "amazon", "flipkart", "myntra", "ajio", "nykaa", "meesho", "snapdeal",
        "shopclues", "tatacliq", "bigbasket", "grofers", "blinkit", "zepto",
        "instamart", "dmart", "reliance", "mall", "store", "mart", "bazaar",
    )),
    (ExpenseCategory.ENTERTAINMENT, (
        "netflix", "spotify", "hotstar", "disney", "bookmyshow", "pvr", "inox",
        "cinema", "movie", "theatre", "game", "play", "xbox", "playstation",
        "games", "steam", "youtube", "zee5", "sonyliv", "jiocinema",
    )),
    (ExpenseCategory.BILLS, (
        "airtel", "jio", "vodafone", "vi", "bsnl", "electricity", "power",
        "tata power", "adani", "gas", "water", "broadband", "internet",
        "wifi", "insurance", "lic", "hdfc life", "icici prudential", "rent",
        "maintenance", "society",
    )),
    (ExpenseCategory.HEALTH, (
        "medicine", "apollo", "medplus", "netmeds", "pharmeasy", "1mg",
        "tata 1mg", "doctor", "lab", "gym", "fitness", "cult", "cultfit", "healthify",
    )),
    (ExpenseCategory.EDUCATION, (
        "school", "college", "university", "tuition", "udemy", "coursera",
        "unacademy", "byju", "byjus", "book", "books", "stationery", "exam", "test",
        "linkedin learning", "skillshare",
    )),
]

# Refunds come first: a reversed salary credit is not salary income.
SOURCE_RULES: List[Tuple[IncomeSource, Tuple[str, ...]]] = [
    (IncomeSource.REFUND, (
        "refund", "reversal", "reversed", "cashback", "cash back",
        "chargeback",
    )),
    (IncomeSource.SALARY, (
        "salary", "payroll", "wages", "stipend", "pay slip",
    )),
    (IncomeSource.INVESTMENT, (
        "dividend", "interest", "mutual fund", "redemption", "maturity",
        "zerodha", "groww", "upstox", "mf",
    )),
    (IncomeSource.FREELANCE, (
        "freelance", "upwork", "fiverr", "toptal", "consulting", "invoice",
    )),
    (IncomeSource.BUSINESS, (
        "business", "settlement", "razorpay", "sales", "merchant credit",
    )),
    (IncomeSource.GIFT, (
        "gift", "gifted", "birthday", "shagun",
    )),
]


@dataclass(frozen=True)
class SmsRecord:
    """A raw SMS as read from the device inbox"""
    sender_id: str
    body: str
    sms_id: str
    date: datetime


@dataclass(frozen=True)
class ParsedTransaction:
    """Transaction extracted from a single bank SMS, pending user review"""
    type: TransactionType
    amount: float
    date: datetime
    raw_message: str
    sender_id: str
    sms_id: str
    merchant: Optional[str] = None
    account_number: Optional[str] = None
    reference_number: Optional[str] = None
    balance: Optional[float] = None
    confidence: float = 1.0

    @property
    def is_debit(self) -> bool:
        return self.type == TransactionType.DEBIT

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT

    def to_dict(self) -> Dict:
        return {
            "sms_id": self.sms_id,
            "sender_id": self.sender_id,
            "date": self.date.isoformat(),
            "type": self.type.value,
            "amount": self.amount,
            "merchant": self.merchant,
            "account_number": self.account_number,
            "reference_number": self.reference_number,
            "balance": self.balance,
            "confidence": self.confidence,
        }


@dataclass
class ClassificationResult:
    """Parsed transaction together with its suggested category or source"""
    transaction: ParsedTransaction
    category: Optional[ExpenseCategory] = None
    source: Optional[IncomeSource] = None
    category_confidence: float = 0.0

    @property
    def label(self) -> str:
        if self.category is not None:
            return self.category.value
        if self.source is not None:
            return self.source.value
        return "other"

    def to_dict(self) -> Dict:
        data = self.transaction.to_dict()
        data.update({
            "category": self.category.value if self.category else None,
            "source": self.source.value if self.source else None,
            "category_confidence": self.category_confidence,
        })
        return data

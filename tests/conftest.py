from datetime import datetime

import pytest

from sms_parser import GenericBankParser
from parsing_service import TransactionParsingService
from config import Settings


@pytest.fixture
def parser():
    return GenericBankParser()


@pytest.fixture
def service():
    return TransactionParsingService(Settings())


@pytest.fixture
def sms_date():
    return datetime(2026, 2, 4, 10, 30)

# sms-expense-parser/sample_messages.py
"""
Sample bank SMS messages for trying the parser without a device inbox
"""

from datetime import datetime, timedelta
from typing import List, Optional

from models import SmsRecord

# (id, sender, body, days ago)
SAMPLE_MESSAGES = [
    ("sample_001", "HD-HDFCBK",
     "Rs.1,250.00 debited from A/c XX4521 on 15-01-24. Info: UPI-SWIGGY-merchant@paytm. "
     "Avl Bal: Rs.45,230.50", 1),
    ("sample_002", "VM-ICICIB",
     "INR 3,500.00 spent on your ICICI Bank Card XX7834 on 20-Jan-24 at AMAZON INDIA. "
     "Avl Bal: INR 1,25,000.00", 2),
    ("sample_003", "BZ-SBIINB",
     "Rs.75,000.00 credited to your A/c XX9876 on 01-Jan-24. Ref: NEFT-SALARY-JAN24. "
     "Avl Bal: Rs.1,45,230.00", 5),
    ("sample_004", "AX-AXISBK",
     "Amt Sent Rs.450.00 From Axis Bank A/C *4521 To gpay-zomato@okaxis On 18-01. "
     "Ref No 401234567890", 3),
    ("sample_005", "VM-KOTAKB",
     "Rs 2,999.00 debited from Kotak Bank A/c XX1234 for purchase at NETFLIX.COM on 10-Jan-24. "
     "Balance: Rs 34,567.89", 10),
    ("sample_006", "HD-HDFCBK",
     "Rs.599.00 credited to A/c XX4521 on 12-01-24. Info: REFUND-AMAZON. Avl Bal: Rs.45,829.50", 8),
    ("sample_007", "VM-PAYTMB",
     "Rs.150 paid to UBER INDIA at Delhi on 19-Jan-24. Paytm Wallet Bal: Rs.2,340", 1),
    ("sample_008", "VM-IDFCFB",
     "INR 1,750.00 spent on your IDFC FIRST Bank Credit Card ending XX4521 at FLIPKART "
     "on 15 Jan 2024 at 02:30 PM", 5),
    ("sample_009", "FD-FEDBK",
     "Rs 500.00 debited via UPI on 16-01-2024 14:30:45 to VPA bigbasket@upi. Ref No 401234567891", 4),
    ("sample_010", "BT-GPAY",
     "Paid Rs.320 to STARBUCKS INDIA using Google Pay. UPI Ref: 401234567892", 2),
    ("sample_011", "AX-AMEXIN",
     "Alert: You've spent INR 5,000.00 on your AMEX card **1234 at MAKEMYTRIP "
     "on 15 January 2024 at 02:30 PM", 7),
    ("sample_012", "VM-PHONEPE",
     "Rs.89 paid to DOMINOS PIZZA via PhonePe. Txn ID: PPE401234567893", 1),
    ("sample_013", "AD-SBIPSG-S",
     "Dear Customer, INR 25,000.00 credited to your A/c No XX2062 on 02/02/2026 through NEFT "
     "with UTR HDFCH00773476458 by LATSPACE TECHNOLOGIES PRIVATE LIMIT, "
     "INFO: BATCHID:0025 0001 SALARY JAN 26", 0),
    ("sample_014", "AD-SBIINB-S",
     "SBI Your A/C XXXXX712062 Debited INR 12,500.00 on 01/02/26 -Transferred to "
     "Master KRISHNA TEJAS. Avl Balance INR 19,850.91-SBI", 1),
    ("sample_015", "VM-SLICE-S",
     "Your slice credit card transaction of Rs. 110 on Upahara darshini is successful. "
     "If not you, call 08048329999 - slice", 0),
    # Not transactions
    ("sample_016", "VM-HDFCBK",
     "123456 is your OTP for txn of Rs 2,000 at AMAZON. Do not share it with anyone.", 0),
    ("sample_017", "AM-AMAZON",
     "Get 50% off on your next Amazon order! Use code SAVE50", 0),
]


def get_sample_messages(now: Optional[datetime] = None, count: Optional[int] = None) -> List[SmsRecord]:
    """Sample messages dated relative to now, optionally limited to count"""
    now = now or datetime.now()
    records = [
        SmsRecord(sender_id=sender, body=body, sms_id=sms_id, date=now - timedelta(days=days))
        for sms_id, sender, body, days in SAMPLE_MESSAGES
    ]
    return records[:count] if count is not None else records

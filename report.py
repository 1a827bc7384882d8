# sms-expense-parser/report.py
"""
Spending and income summaries over classified SMS transactions
"""

from typing import List

import pandas as pd

from models import ClassificationResult

SUMMARY_COLUMNS = ['name', 'amount', 'count', 'percentage']


def results_to_frame(results: List[ClassificationResult]) -> pd.DataFrame:
    """One row per classified transaction, with a single 'label' column"""
    rows = []
    for r in results:
        row = r.to_dict()
        row['label'] = r.label
        rows.append(row)
    return pd.DataFrame(rows)


def _summarize(df: pd.DataFrame, kind: str) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    subset = df[df['type'] == kind]
    if subset.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    summary = (
        subset.groupby('label')['amount']
        .agg(amount='sum', count='count')
        .reset_index()
        .rename(columns={'label': 'name'})
    )
    total = summary['amount'].sum()
    summary['amount'] = summary['amount'].round(2)
    summary['percentage'] = (summary['amount'] / total * 100).round(2) if total > 0 else 0.0
    return summary.sort_values('amount', ascending=False).reset_index(drop=True)[SUMMARY_COLUMNS]


def spending_by_category(results: List[ClassificationResult]) -> pd.DataFrame:
    """Debits grouped by expense category, largest first"""
    return _summarize(results_to_frame(results), 'debit')


def income_by_source(results: List[ClassificationResult]) -> pd.DataFrame:
    """Credits grouped by income source, largest first"""
    return _summarize(results_to_frame(results), 'credit')

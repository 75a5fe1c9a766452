"""
Date utility functions
"""
import math
from datetime import datetime, timedelta
from typing import Optional


def calculate_trial_end_date(start_date: datetime, days: int = 7) -> datetime:
    """
    Calculate trial end date from a start date

    Args:
        start_date: The start date for the trial period
        days: Number of days for the trial period (default: 7)

    Returns:
        datetime: Trial end date
    """
    return start_date + timedelta(days=days)


def trial_days_remaining(trial_end_date: Optional[datetime], now: Optional[datetime] = None) -> int:
    """Whole days left in the trial, rounded up; 0 once expired or unknown"""
    if not trial_end_date:
        return 0
    seconds = (trial_end_date - (now or datetime.utcnow())).total_seconds()
    return max(0, math.ceil(seconds / 86400))

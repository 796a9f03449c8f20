from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from .model import PunchRecord


def generate_sample_records(today: date, *, days: int = 30, rng: Optional[random.Random] = None) -> List[PunchRecord]:
    """Weekday sessions for the last ``days`` days: one or two per day, 8-9 AM to 4-6 PM."""
    rng = rng or random.Random()
    records: List[PunchRecord] = []

    for offset in range(days):
        day = today - timedelta(days=offset)
        if day.weekday() >= 5:
            continue

        count = 1 if rng.random() > 0.5 else 2
        for j in range(count):
            punch_in = datetime.combine(day, time(8 + rng.randrange(2), rng.randrange(60)))
            punch_out = datetime.combine(day, time(16 + rng.randrange(3), rng.randrange(60)))
            records.append(
                PunchRecord(
                    id=f"{day.isoformat()}-{j + 1}",
                    date=day,
                    punch_in=punch_in,
                    punch_out=punch_out,
                    notes="Morning shift" if j == 0 else "Afternoon shift",
                )
            )

    return records

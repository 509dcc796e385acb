#!/usr/bin/env python3
"""
Run the certification audit if today is the audit day.
Meant for a daily cron entry; does nothing on other days.
Usage: python scripts/run_monthly_evaluation.py [--today YYYY-MM-DD]
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import date

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from certengine.config import settings
from certengine.database import async_session_maker, engine
from certengine.engine.orchestrator import CertificationEvaluator
from certengine.storage.repositories import SqlCertificationStore
from certengine.storage.scoring import RatingsScoringSource


async def run(today: date) -> bool:
    async with async_session_maker() as session:
        evaluator = CertificationEvaluator(
            SqlCertificationStore(session), RatingsScoringSource(session)
        )
        outcome = await evaluator.run_monthly_evaluation(today)
    await engine.dispose()

    print(outcome.message)
    for r in outcome.results:
        if r.status_before != r.status_after:
            print(f"  {r.employee_name}: {r.status_before.value} -> {r.status_after.value}")
    return outcome.success


if __name__ == "__main__":
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description="Run the monthly certification audit.")
    parser.add_argument("--today", type=date.fromisoformat, default=None)
    args = parser.parse_args()
    asyncio.run(run(args.today or date.today()))

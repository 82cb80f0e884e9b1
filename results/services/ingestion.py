"""
Idempotent ingestion of scraped candidates.

A candidate is a duplicate when a stored result for the same game already
has the same draw date. Candidates are checked and inserted one by one, so a
failure part-way leaves the earlier games ingested.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction

from results.services.result_store import DjangoResultStore
from results.services.section_parser import ScrapedCandidate

logger = logging.getLogger(__name__)


@dataclass
class IngestionReport:
    added_count: int = 0
    added_results: List[dict] = field(default_factory=list)
    skipped_results: List[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'addedCount': self.added_count,
            'addedResults': self.added_results,
            'skippedResults': self.skipped_results,
        }


def _summary(candidate: ScrapedCandidate) -> dict:
    return {
        'game': candidate.game_name,
        'game_slug': candidate.game_slug,
        'date': candidate.draw_date.isoformat(),
        'numbers': list(candidate.winning_numbers),
        'bonus': candidate.bonus_number,
    }


def process_scraped_results(candidates: Iterable[ScrapedCandidate],
                            store: Optional[DjangoResultStore] = None) -> IngestionReport:
    """
    Insert every candidate whose (game, draw date) is not stored yet

    Args:
        candidates: Parsed results from one scrape pass
        store: Storage collaborator

    Returns:
        IngestionReport with the added and skipped draws
    """
    store = store or DjangoResultStore()
    report = IngestionReport()

    for candidate in candidates:
        existing = store.get_results_by_game(candidate.game_slug)
        duplicate = any(result.draw_date == candidate.draw_date for result in existing)

        if duplicate:
            report.skipped_results.append(_summary(candidate))
            logger.debug(f"Skipped duplicate: {candidate.game_name} - {candidate.draw_date}")
            continue

        try:
            with transaction.atomic():
                store.create_result(candidate)
        except IntegrityError:
            # Another writer stored the same draw between the check and the insert
            report.skipped_results.append(_summary(candidate))
            logger.info(f"Skipped concurrent duplicate: {candidate.game_name} - {candidate.draw_date}")
            continue

        report.added_count += 1
        report.added_results.append(_summary(candidate))
        logger.info(f"Added new result: {candidate.game_name} - {candidate.draw_date} {candidate.winning_numbers}")

    logger.info(
        f"Ingestion complete: added {report.added_count}, skipped {len(report.skipped_results)} duplicates"
    )
    return report

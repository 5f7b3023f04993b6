from typing import Iterator, List, Sequence, Tuple

from loguru import logger

from src.students.roster.models import RowDiagnostic, StudentRecord
from src.students.roster.repository import StudentRepository
from src.utils.exceptions import PersistenceError

def iter_batches(records: Sequence[StudentRecord], batch_size: int) -> Iterator[Sequence[StudentRecord]]:
    for start in range(0, len(records), batch_size):
        yield records[start:start + batch_size]

def in_row_order(diagnostics: List[RowDiagnostic]) -> List[RowDiagnostic]:
    """
    Row-level diagnostics sorted by row. The sort is stable, so reasons for the same row keep
    the order of the stage that produced them.
    """
    return sorted(diagnostics, key=lambda diagnostic: diagnostic.row)

def exclude_existing(
    repository: StudentRepository,
    candidates: List[StudentRecord],
    label: str = "Row",
) -> Tuple[List[StudentRecord], List[RowDiagnostic]]:
    """
    Drop candidates whose reg_no is already stored, with one diagnostic each.

    All registration numbers are looked up in a single pre-fetch. Candidates are only
    compared against stored rows, never against each other: two new rows sharing a
    reg_no both pass here and the database decides at insert time.
    """
    existing = repository.find_existing_reg_nos(candidate.reg_no for candidate in candidates)

    kept: List[StudentRecord] = []
    diagnostics: List[RowDiagnostic] = []
    for candidate in candidates:
        if candidate.reg_no in existing:
            diagnostics.append(RowDiagnostic(
                label=label,
                row=candidate.row_number,
                reason=f"Registration number '{candidate.reg_no}' already exists",
            ))
            continue
        kept.append(candidate)

    logger.info("Duplicate check: {} of {} candidates already stored", len(diagnostics), len(candidates))
    return kept, diagnostics

def persist_in_batches(
    repository: StudentRepository,
    records: List[StudentRecord],
    batch_size: int,
) -> Tuple[int, List[RowDiagnostic]]:
    """
    Insert records in fixed-size batches, in input order. Returns `(persisted_count, diagnostics)`.

    A failed batch produces one diagnostic for the whole batch and is not retried;
    the following batches are still attempted.
    """
    persisted = 0
    diagnostics: List[RowDiagnostic] = []

    for batch_number, batch in enumerate(iter_batches(records, batch_size), start=1):
        try:
            inserted = repository.insert_students(batch)
        except PersistenceError as e:
            first_row, last_row = batch[0].row_number, batch[-1].row_number
            logger.warning("Batch {} (rows {}-{}) failed: {}", batch_number, first_row, last_row, e.message)
            diagnostics.append(RowDiagnostic(
                label="Batch",
                row=batch_number,
                reason=f"Failed to import rows {first_row}-{last_row}: {e.message}",
            ))
            continue

        persisted += len(inserted)
        logger.info("Batch {} stored {} students", batch_number, len(inserted))

    return persisted, diagnostics

def persist_one_by_one(
    repository: StudentRepository,
    records: List[StudentRecord],
    label: str = "Row",
) -> Tuple[int, List[RowDiagnostic]]:
    """
    Insert records one at a time so a failure only costs its own record. A unique
    violation is reported as an existing registration number, anything else with the
    database message.
    """
    persisted = 0
    diagnostics: List[RowDiagnostic] = []

    for record in records:
        try:
            repository.insert_students([record])
        except PersistenceError as e:
            reason = f"Registration number '{record.reg_no}' already exists" if e.duplicate else e.message
            logger.warning("{} {} ({}) not stored: {}", label, record.row_number, record.reg_no, e.message)
            diagnostics.append(RowDiagnostic(label=label, row=record.row_number, reason=reason))
            continue
        persisted += 1

    logger.info("Stored {} of {} students one by one", persisted, len(records))
    return persisted, diagnostics

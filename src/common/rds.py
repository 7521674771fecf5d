"""Read/write boundary between the pipeline and its relational storage."""

from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import bindparam, text

from common.datetime import parse_optional_datetime
from common.models import CompiledItem, RawHeadline

logger = logging.getLogger(__name__)

_HEADLINE_COLUMNS = "id, source_id, title, description, url, published_at"


def _headline_from_row(row: Any) -> RawHeadline:
    return RawHeadline(
        id=str(row["id"]),
        title=row["title"],
        description=row["description"],
        url=row["url"],
        published_at=parse_optional_datetime(row["published_at"]),
        source_id=row["source_id"],
    )


def load_headlines_for_run(
    run_id: str,
    session: Any,
    headline_ids: list[str] | None = None,
    selected_only: bool = False,
) -> list[RawHeadline]:
    """
    Load raw headlines for a run, in insertion order.

    Args:
        run_id: Run to load headlines for
        session: SQLAlchemy session
        headline_ids: Restrict to these ids (takes precedence over selected_only)
        selected_only: Only headlines the user marked as selected

    Returns:
        List of RawHeadline
    """
    params: dict[str, Any] = {"run_id": run_id}
    where = "WHERE run_id = :run_id"

    if headline_ids:
        where += " AND id IN :headline_ids"
        params["headline_ids"] = list(headline_ids)
    elif selected_only:
        where += " AND is_selected = :is_selected"
        params["is_selected"] = True

    stmt = text(f"SELECT {_HEADLINE_COLUMNS} FROM raw_headlines {where} ORDER BY created_at, id")
    if headline_ids:
        stmt = stmt.bindparams(bindparam("headline_ids", expanding=True))

    rows = session.execute(stmt, params).mappings().all()
    headlines = [_headline_from_row(row) for row in rows]

    logger.info("Loaded %d headlines for run %s", len(headlines), run_id)
    return headlines


def load_headlines_by_ids(headline_ids: list[str], session: Any) -> list[RawHeadline]:
    """Load raw headlines by id. Order of the result follows headline_ids; missing ids are skipped."""
    if not headline_ids:
        return []

    stmt = text(
        f"SELECT {_HEADLINE_COLUMNS} FROM raw_headlines WHERE id IN :headline_ids"
    ).bindparams(bindparam("headline_ids", expanding=True))
    rows = session.execute(stmt, {"headline_ids": list(headline_ids)}).mappings().all()

    by_id = {str(row["id"]): _headline_from_row(row) for row in rows}
    missing = [hid for hid in headline_ids if hid not in by_id]
    if missing:
        logger.warning("Missing %d of %d source headlines: %s", len(missing), len(headline_ids), missing)

    return [by_id[hid] for hid in headline_ids if hid in by_id]


def save_headline_annotations(annotated: list[Any], session: Any) -> int:
    """
    Write deduplication annotations onto existing raw headline rows.

    Args:
        annotated: Objects with id, deduplication_group_id, heat_score, is_best_version
        session: SQLAlchemy session

    Returns:
        Number of rows updated
    """
    if not annotated:
        return 0

    stmt = text(
        """
        UPDATE raw_headlines
        SET deduplication_group_id = :deduplication_group_id,
            heat_score = :heat_score,
            is_best_version = :is_best_version
        WHERE id = :id
        """
    )
    updated = 0
    for record in annotated:
        result = session.execute(
            stmt,
            {
                "id": record.id,
                "deduplication_group_id": record.deduplication_group_id,
                "heat_score": record.heat_score,
                "is_best_version": record.is_best_version,
            },
        )
        updated += result.rowcount or 0

    session.commit()
    logger.info("Saved deduplication annotations for %d headlines", updated)
    return updated


def insert_compiled_items(items: list[CompiledItem], run_id: str, session: Any) -> None:
    """Insert newly compiled items for a run."""
    if not items:
        logger.warning("No compiled items to save")
        return

    session.execute(
        text(
            """
            INSERT INTO compiled_items (
                id,
                run_id,
                topic,
                hook,
                summary,
                source_headline_ids,
                heat_score,
                is_selected
            )
            VALUES (
                :id,
                :run_id,
                :topic,
                :hook,
                :summary,
                :source_headline_ids,
                :heat_score,
                :is_selected
            )
            """
        ),
        [
            {
                "id": item.id,
                "run_id": run_id,
                "topic": item.topic,
                "hook": item.hook,
                "summary": item.summary,
                "source_headline_ids": json.dumps(item.source_headline_ids),
                "heat_score": item.heat_score,
                "is_selected": item.is_selected,
            }
            for item in items
        ],
    )
    session.commit()
    logger.info("Saved %d compiled items for run %s", len(items), run_id)


def load_compiled_item(item_id: str, session: Any) -> CompiledItem | None:
    """Load a compiled item by id, or None if it doesn't exist."""
    row = session.execute(
        text(
            """
            SELECT id, topic, hook, summary, source_headline_ids, heat_score, is_selected
            FROM compiled_items
            WHERE id = :id
            """
        ),
        {"id": item_id},
    ).mappings().first()

    if row is None:
        return None

    source_ids = row["source_headline_ids"]
    if isinstance(source_ids, str):
        source_ids = json.loads(source_ids)

    return CompiledItem(
        id=row["id"],
        topic=row["topic"],
        hook=row["hook"],
        summary=row["summary"],
        source_headline_ids=[str(sid) for sid in source_ids],
        heat_score=row["heat_score"],
        is_selected=bool(row["is_selected"]),
    )


def update_compiled_item_content(item_id: str, hook: str, summary: str, session: Any) -> None:
    """Overwrite hook and summary of an existing compiled item; nothing else changes."""
    result = session.execute(
        text(
            """
            UPDATE compiled_items
            SET hook = :hook,
                summary = :summary,
                updated_at = CURRENT_TIMESTAMP
            WHERE id = :id
            """
        ),
        {"id": item_id, "hook": hook, "summary": summary},
    )
    if not result.rowcount:
        session.rollback()
        raise LookupError(f"Compiled item not found: {item_id}")

    session.commit()
    logger.info("Updated hook and summary for compiled item %s", item_id)

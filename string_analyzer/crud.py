from datetime import timezone
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from string_analyzer import models
from string_analyzer.schemas import StringProperties, StringRecord


def to_record(row: models.StringRecordRow) -> StringRecord:
    created_at = row.created_at
    # SQLite drops tzinfo on the way back; values are always written as UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return StringRecord(
        id=row.id,
        value=row.value,
        properties=StringProperties(
            length=row.length,
            is_palindrome=row.is_palindrome,
            unique_characters=row.unique_characters,
            word_count=row.word_count,
            sha256_hash=row.sha256_hash,
            character_frequency_map=dict(row.character_frequency_map),
        ),
        created_at=created_at,
    )


def add_string(db: Session, record: StringRecord) -> None:
    props = record.properties
    db.add(
        models.StringRecordRow(
            id=record.id,
            value=record.value,
            length=props.length,
            is_palindrome=props.is_palindrome,
            unique_characters=props.unique_characters,
            word_count=props.word_count,
            sha256_hash=props.sha256_hash,
            character_frequency_map=props.character_frequency_map,
            created_at=record.created_at,
        )
    )
    db.commit()


def get_string(db: Session, record_id: str) -> Optional[models.StringRecordRow]:
    return db.get(models.StringRecordRow, record_id)


def get_strings(db: Session) -> List[models.StringRecordRow]:
    stmt = select(models.StringRecordRow).order_by(
        models.StringRecordRow.created_at.asc(),
        models.StringRecordRow.id.asc(),
    )
    return list(db.scalars(stmt))


def delete_string(db: Session, record_id: str) -> bool:
    result = db.execute(delete(models.StringRecordRow).where(models.StringRecordRow.id == record_id))
    db.commit()
    return result.rowcount > 0


def count_strings(db: Session) -> int:
    return db.scalar(select(func.count(models.StringRecordRow.id))) or 0


def delete_all(db: Session) -> None:
    db.execute(delete(models.StringRecordRow))
    db.commit()

from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from reportverse.core.exceptions import ValidationError
from reportverse.core.logging_config import logger
from reportverse.models.academic_record import AcademicRecord
from reportverse.schemas.academic import AcademicResponse, AcademicUpdate

LIST_FIELDS = ("semester_gpa", "mooc_courses", "certifications", "semester_marksheets")


def coerce_backlogs(value: Any) -> int:
    """Finite numbers and numeric strings are taken as-is; anything else counts as 0"""
    try:
        backlogs = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    if backlogs < 0:
        raise ValidationError("Backlogs cannot be negative", field="backlogs")
    return backlogs


def academic_response(record: Optional[AcademicRecord]) -> AcademicResponse:
    if record is None:
        return AcademicResponse()
    return AcademicResponse(
        semester_gpa=record.semester_gpa or [],
        mooc_courses=record.mooc_courses or [],
        certifications=record.certifications or [],
        semester_marksheets=record.semester_marksheets or [],
        backlogs=record.backlogs or 0,
    )


class AcademicService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, mentee_id: str) -> Optional[AcademicRecord]:
        result = await self.db.execute(
            select(AcademicRecord).where(AcademicRecord.mentee_id == mentee_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, mentee_id: str, update: AcademicUpdate) -> AcademicRecord:
        """Create or partially update; fields the client did not send stay as they are"""
        record = await self.get(mentee_id)
        if record is None:
            record = AcademicRecord(
                mentee_id=mentee_id,
                semester_gpa=[],
                mooc_courses=[],
                certifications=[],
                semester_marksheets=[],
                backlogs=0,
            )
            self.db.add(record)

        sent = update.model_fields_set
        for field in LIST_FIELDS:
            if field in sent:
                items = getattr(update, field) or []
                setattr(record, field, [
                    item.model_dump(by_alias=True) if hasattr(item, "model_dump") else item
                    for item in items
                ])
        if "backlogs" in sent:
            record.backlogs = coerce_backlogs(update.backlogs)

        await self.db.commit()
        await self.db.refresh(record)
        logger.info(
            f"Academic record updated for mentee {mentee_id}",
            extra={"event_type": "academics", "mentee_id": mentee_id, "fields": sorted(sent)}
        )
        return record

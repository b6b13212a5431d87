from pydantic import Field
from typing import Any, List, Optional

from reportverse.schemas.common import CamelModel


class SemesterGPA(CamelModel):
    semester: int = Field(..., ge=1)
    gpa: float = Field(..., ge=0)


class SemesterMarksheet(CamelModel):
    semester: int = Field(..., ge=1)
    image_url: Optional[str] = None


class AcademicUpdate(CamelModel):
    """Every field optional; omitted fields keep their stored value"""
    semester_gpa: Optional[List[SemesterGPA]] = Field(None, alias="semesterGPA")
    mooc_courses: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    semester_marksheets: Optional[List[SemesterMarksheet]] = None
    # Loosely typed: anything that is not a non-negative number becomes 0
    backlogs: Optional[Any] = None


class AcademicResponse(CamelModel):
    semester_gpa: List[SemesterGPA] = Field([], alias="semesterGPA")
    mooc_courses: List[str] = []
    certifications: List[str] = []
    semester_marksheets: List[SemesterMarksheet] = []
    backlogs: int = 0

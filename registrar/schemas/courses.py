from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, time

from registrar.db.models import Semester


class CourseCreate(BaseModel):
    course_id: str = Field(..., alias="courseId")
    course_name: str = Field(..., alias="courseName")
    professors_name: str = Field(..., alias="professorsName")
    semester: Semester = "A"
    starting_date: date = Field(..., alias="startingDate")
    end_date: date = Field(..., alias="endDate")
    day_of_week: str = Field(..., alias="dayOfWeek")
    start_time: time = Field(..., alias="startTime")
    end_time: time = Field(..., alias="endTime")
    credit_points: float = Field(..., alias="creditPoints")
    description: Optional[str] = None

    class Config:
        populate_by_name = True


class CourseUpdate(BaseModel):
    course_name: Optional[str] = Field(None, alias="courseName")
    professors_name: Optional[str] = Field(None, alias="professorsName")
    semester: Optional[Semester] = None
    starting_date: Optional[date] = Field(None, alias="startingDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    day_of_week: Optional[str] = Field(None, alias="dayOfWeek")
    start_time: Optional[time] = Field(None, alias="startTime")
    end_time: Optional[time] = Field(None, alias="endTime")
    credit_points: Optional[float] = Field(None, alias="creditPoints")
    description: Optional[str] = None

    class Config:
        populate_by_name = True


class CourseDeleteResponse(BaseModel):
    deleted: List[str]
    unenrolled_students: List[str]

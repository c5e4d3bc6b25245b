from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.database import get_db
from backend.stores import catalog_store

router = APIRouter(tags=['courses'])


class CourseRequest(BaseModel):
    name: str
    description: str | None = None
    instructor: str | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Course name is required.')
        return normalized


class CourseResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    instructor: str | None = None

    class Config:
        from_attributes = True


@router.post('', response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(data: CourseRequest, db: Session = Depends(get_db)):
    return catalog_store.create_course(db, data.name, data.description, data.instructor)


@router.get('', response_model=list[CourseResponse])
def list_courses(db: Session = Depends(get_db)):
    return catalog_store.list_courses(db)


@router.get('/{course_id}', response_model=CourseResponse)
def get_course(course_id: int, db: Session = Depends(get_db)):
    return catalog_store.get_course(db, course_id)


@router.put('/{course_id}', response_model=CourseResponse)
def update_course(course_id: int, data: CourseRequest, db: Session = Depends(get_db)):
    return catalog_store.update_course(db, course_id, data.name, data.description, data.instructor)


@router.delete('/{course_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_course(course_id: int, db: Session = Depends(get_db)):
    catalog_store.delete_course(db, course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

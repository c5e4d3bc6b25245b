from datetime import datetime

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.core import storage
from backend.core.errors import StoreError
from backend.database import get_db
from backend.stores import catalog_store

router = APIRouter(tags=['assignments'])


class AssignmentRequest(BaseModel):
    title: str
    description: str | None = None
    due_date: datetime | None = None
    course_id: int | None = None

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Assignment title is required.')
        return normalized


class AssignmentResponse(BaseModel):
    id: int
    title: str
    description: str | None = None
    due_date: datetime | None = None
    course_id: int | None = None
    file_path: str | None = None

    class Config:
        from_attributes = True


@router.post('', response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(data: AssignmentRequest, db: Session = Depends(get_db)):
    return catalog_store.create_assignment(db, data.title, data.description, data.due_date, data.course_id)


@router.get('', response_model=list[AssignmentResponse])
def list_assignments(
    course_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return catalog_store.list_assignments(db, course_id=course_id)


@router.get('/{assignment_id}', response_model=AssignmentResponse)
def get_assignment(assignment_id: int, db: Session = Depends(get_db)):
    return catalog_store.get_assignment(db, assignment_id)


@router.put('/{assignment_id}', response_model=AssignmentResponse)
def update_assignment(assignment_id: int, data: AssignmentRequest, db: Session = Depends(get_db)):
    return catalog_store.update_assignment(
        db,
        assignment_id,
        data.title,
        data.description,
        data.due_date,
        data.course_id,
    )


@router.post('/{assignment_id}/attach', response_model=AssignmentResponse)
def attach_file(
    assignment_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    catalog_store.get_assignment(db, assignment_id)

    try:
        file_path = storage.save_attachment(assignment_id, file)
    except storage.AttachmentTooLargeError as exc:
        raise HTTPException(
            status_code=413,
            detail=str(exc),
        ) from exc

    try:
        return catalog_store.attach_assignment_file(db, assignment_id, file_path)
    except StoreError:
        storage.discard_attachment(file_path)
        raise


@router.delete('/{assignment_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: int, db: Session = Depends(get_db)):
    catalog_store.delete_assignment(db, assignment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

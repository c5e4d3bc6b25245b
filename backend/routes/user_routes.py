import logging

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from backend.auth import jwt_handler
from backend.auth.dependencies import get_current_user
from backend.auth.password import hash_password, verify_password
from backend.core.errors import AuthFailure
from backend.database import get_db
from backend.models.user import User
from backend.stores import user_store

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72
INVALID_CREDENTIALS = 'Invalid email or password.'


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    local_part, _, domain = normalized.partition('@')
    if not local_part or not domain or len(normalized) > 255:
        raise ValueError('A valid email address is required.')
    return normalized


class CreateUserRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError('Password is required.')
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f'Password must be {MAX_PASSWORD_BYTES} bytes or fewer.')
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return value.strip().lower()


class UserResponse(BaseModel):
    id: int
    email: str
    verified: bool
    tracked_courses: list[int]

    class Config:
        from_attributes = True


class LoginResponse(BaseModel):
    auth: bool
    token: str


class TrackedCoursesUpdateResponse(BaseModel):
    message: str
    tracked_courses: list[int]


@router.post('/create', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(data: CreateUserRequest, db: Session = Depends(get_db)):
    return user_store.create_user(db, email=data.email, password_hash=hash_password(data.password))


@router.post('/login', response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = user_store.get_user_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.password_hash):
        logger.warning('Failed login attempt for %s', data.email)
        raise AuthFailure(INVALID_CREDENTIALS)

    token = jwt_handler.create_access_token(user_id=user.id, verified=user.verified)
    logger.info('Login: user %s', user.id)
    return LoginResponse(auth=True, token=token)


@router.get('', response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return user_store.list_users(db)


@router.get('/verified', response_model=list[UserResponse])
def list_verified_users(db: Session = Depends(get_db)):
    return user_store.list_users(db, verified=True)


@router.get('/unverified', response_model=list[UserResponse])
def list_unverified_users(db: Session = Depends(get_db)):
    return user_store.list_users(db, verified=False)


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.get('/{user_id}', response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return user_store.get_user(db, user_id)


@router.post('/{user_id}/verify', response_model=UserResponse)
def verify_user(user_id: int, db: Session = Depends(get_db)):
    return user_store.verify_user(db, user_id)


@router.post('/{user_id}/track_course/{course_id}', response_model=TrackedCoursesUpdateResponse)
def track_course(user_id: int, course_id: int, db: Session = Depends(get_db)):
    tracked = user_store.add_tracked_course(db, user_id, course_id)
    return TrackedCoursesUpdateResponse(message='Course added to tracked list.', tracked_courses=tracked)


@router.post('/{user_id}/untrack_course/{course_id}', response_model=TrackedCoursesUpdateResponse)
def untrack_course(user_id: int, course_id: int, db: Session = Depends(get_db)):
    tracked = user_store.remove_tracked_course(db, user_id, course_id)
    return TrackedCoursesUpdateResponse(message='Course removed from tracked list.', tracked_courses=tracked)


@router.get('/{user_id}/tracked_courses', response_model=list[int])
def get_tracked_courses(user_id: int, db: Session = Depends(get_db)):
    return user_store.get_tracked_courses(db, user_id)

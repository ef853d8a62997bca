# skypath/schemas.py
"""요청 검증 스키마 - 모든 엔드포인트는 DB 접근 전에 여기서 입력을 검증"""

import re
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .scores import SUBJECT_FIELDS

PERIOD_PATTERN = re.compile(r'[0-9]{4}-(0[1-9]|1[0-2])')
EMAIL_PATTERN = re.compile(r'[^@\s/]+@[^@\s/]+\.[^@\s/]+')


class RequestSchema(BaseModel):
    model_config = ConfigDict(extra='forbid', str_strip_whitespace=True, coerce_numbers_to_str=True)

    # 필수 항목 누락 시 공통 메시지
    missing_message: ClassVar[Optional[str]] = None


class QuerySchema(RequestSchema):
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)


def parse_body(schema, data):
    """JSON 본문 또는 form/query dict 검증

    실패 시 메시지 하나를 담은 ValidationError 발생
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(_error_message(schema, e.errors()))


def _is_missing(err):
    return err['type'] == 'missing' or (err['loc'] and err.get('input', '') is None)


def _error_message(schema, errors):
    missing = [err for err in errors if _is_missing(err)]
    if missing:
        if schema.missing_message:
            return schema.missing_message
        return f"{_field_name(missing[0])} is required"

    err = errors[0]
    field = _field_name(err)
    if err['type'] == 'extra_forbidden':
        return f"Unknown field: {field}"
    if err['type'] == 'value_error':
        return str(err['ctx']['error'])
    return f"Invalid {field}: {err['msg']}"


def _field_name(err):
    return '.'.join(str(part) for part in err['loc'])


# ----------------------------------------------------------------
# 인증
# ----------------------------------------------------------------

class RegisterRequest(RequestSchema):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
    name: str = Field(min_length=1)
    grade: Optional[str] = None
    school: Optional[str] = None

    @field_validator('email')
    @classmethod
    def check_email(cls, value):
        if not EMAIL_PATTERN.fullmatch(value):
            raise ValueError('Invalid email format')
        return value


class LoginRequest(RequestSchema):
    missing_message = 'Email and password required'

    email: str
    password: str


# ----------------------------------------------------------------
# 사용자
# ----------------------------------------------------------------

class ProfileUpdateRequest(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1)
    grade: Optional[str] = None
    school: Optional[str] = None


class PasswordChangeRequest(RequestSchema):
    missing_message = 'Current and new password required'

    currentPassword: str
    newPassword: str = Field(min_length=1)


class ScoresRequest(RequestSchema):
    missing_message = 'All scores required'

    korean: int
    math: int
    english: int
    science: int

    @field_validator(*SUBJECT_FIELDS, mode='before')
    @classmethod
    def reject_bool(cls, value):
        # JSON true/false 는 int 로 변환되지 않도록
        if isinstance(value, bool):
            raise ValueError('Scores must be numbers')
        return value

    @field_validator(*SUBJECT_FIELDS)
    @classmethod
    def check_range(cls, value):
        if value < 0 or value > 100:
            raise ValueError('Scores must be between 0 and 100')
        return value

    def scores(self):
        return {field: getattr(self, field) for field in SUBJECT_FIELDS}


class ScoreHistoryRequest(ScoresRequest):
    missing_message = 'All fields required'

    date: str

    @field_validator('date')
    @classmethod
    def check_period(cls, value):
        if not value:
            raise ValueError('All fields required')
        if not PERIOD_PATTERN.fullmatch(value):
            raise ValueError('Invalid date format. Use YYYY-MM')
        return value


class ProgressRequest(RequestSchema):
    missing_message = 'Progress required'

    progress: float = Field(ge=0)
    completed: bool = False


# ----------------------------------------------------------------
# 영상
# ----------------------------------------------------------------

class VideoListQuery(QuerySchema):
    grade: Optional[str] = None
    subject: Optional[str] = None
    provider: Optional[str] = None
    search: Optional[str] = None
    limit: int = Field(default=50, ge=1)
    page: int = Field(default=1, ge=1)


class VideoSearchQuery(QuerySchema):
    missing_message = 'Search query required'

    query: str
    grade: Optional[str] = None
    subject: Optional[str] = None

    @field_validator('query')
    @classmethod
    def check_query(cls, value):
        if not value:
            raise ValueError('Search query required')
        return value


class VideoUploadForm(QuerySchema):
    title: str = Field(min_length=1)
    instructor: str = Field(min_length=1)
    provider: str = Field(min_length=1)
    grade: str = Field(min_length=1)
    subject: str = Field(min_length=1)
    duration: Optional[str] = None
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    tags: Optional[str] = None

    def tag_list(self):
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(',') if tag.strip()]

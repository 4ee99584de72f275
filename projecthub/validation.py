# projecthub/validation.py
"""
요청 본문 검증 계층.

핸들러가 서비스를 호출하기 전에 pydantic 스키마로 필드 존재 여부와 형식을 검사하고,
실패하면 필드 단위 상세 정보를 담은 ValidationError를 발생시킵니다.
"""
import uuid
from datetime import date
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from projecthub.services.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

UPDATABLE_PROJECT_FIELDS = ("name", "description", "start_date", "end_date", "status")


def is_valid_id(value: Any) -> bool:
    """레코드 ID로 사용할 수 있는 UUID 문자열(32자리 hex 또는 하이픈 포함 형식)인지 확인합니다."""
    if not isinstance(value, str):
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def normalize_id(value: str) -> str:
    """하이픈 포함 형식을 저장 형식(32자리 소문자 hex)으로 바꿉니다."""
    return uuid.UUID(value).hex


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


class _RequestModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CreateProjectRequest(_RequestModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")

    @field_validator("name", "description", mode="before")
    @classmethod
    def trim_text(cls, v):
        return _strip(v)


class UpdateProjectRequest(_RequestModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    status: Optional[str] = Field(None, max_length=50)

    @field_validator("name", "description", "status", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        v = _strip(v)
        return v or None

    @model_validator(mode="after")
    def require_some_field(self):
        if all(getattr(self, field) is None for field in UPDATABLE_PROJECT_FIELDS):
            raise ValueError("Enter some details to change/update")
        return self

    def changes(self) -> Dict[str, Any]:
        """값이 주어진 필드만 담은 딕셔너리를 반환합니다."""
        return self.model_dump(include=set(UPDATABLE_PROJECT_FIELDS), exclude_none=True)


class RegisterUserRequest(_RequestModel):
    username: str = Field(..., min_length=2, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def trim_username(cls, v):
        return _strip(v)


class LoginRequest(_RequestModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("username", mode="before")
    @classmethod
    def trim_username(cls, v):
        return _strip(v)


def _field_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    errors = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())) or "body"
        message = err.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.append({"field": field, "message": message})
    return errors


def validate(schema: Type[ModelT], data: Any) -> ModelT:
    """
    요청 본문을 스키마로 검증합니다.

    Returns:
        검증과 정규화(공백 제거, 날짜 변환)를 마친 스키마 인스턴스.

    Raises:
        ValidationError: 본문이 JSON 객체가 아니거나 규칙을 만족하지 않을 때.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object.", [{"field": "body", "message": "Expected an object"}])
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = _field_errors(e)
        raise ValidationError("Request validation failed.", errors)

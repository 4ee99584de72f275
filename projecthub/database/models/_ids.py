import uuid


def new_id() -> str:
    """새 레코드의 기본 키로 사용할 32자리 16진수 문자열을 생성합니다."""
    return uuid.uuid4().hex

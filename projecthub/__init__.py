"""projecthub: 프로젝트 관리 REST 백엔드."""

__version__ = "0.1.0"

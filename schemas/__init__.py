"""schemas: 요청/응답 Pydantic 모델 및 응답 직렬화 패키지."""

"""utils: 유틸리티 함수들을 모아놓은 패키지.

Modules:
    password: 비밀번호 해싱 및 검증
    jwt_utils: Access Token 발급 및 검증
    formatters: 날짜/시간, Y/N 플래그 포맷팅
    exceptions: 도메인 예외와 HTTP 에러 헬퍼
    pagination: 페이지 번호 기반 페이지네이션
"""

"""services: 비즈니스 로직 패키지.

트랜잭션 경계를 정하고 리포지토리 함수에 커서를 전달하는 서비스 클래스를 제공합니다.
"""

"""database: MySQL 연결 풀, 트랜잭션, 스키마 관리 패키지."""

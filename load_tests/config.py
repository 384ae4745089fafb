"""config.py: 부하 테스트 공통 설정값."""

# 계정 패턴: loaduser00001@loadtest.kr ~ loaduser00200@loadtest.kr
ACCOUNT_START_INDEX = 1
ACCOUNT_COUNT = 200
ACCOUNT_EMAIL_PATTERN = "loaduser{:05d}@loadtest.kr"
ACCOUNT_USERNAME_PATTERN = "loaduser{:05d}"
ACCOUNT_PASSWORD = "Test1234!"

# 요청 타임아웃(초)
REQUEST_TIMEOUT = 10
LOGIN_RETRY_WAIT = 5

# 사용자 유형별 대기 시간(초)
READER_WAIT = (1, 3)
WRITER_WAIT = (5, 15)
ACTIVE_WAIT = (2, 6)

# 피드 목록 조회 범위
FEED_LIST_LIMIT = 20
FEED_LIST_MAX_PAGE = 10

# 태그별(전체 목록은 None 키) 최근 feed_id 캐시 크기
FEED_CACHE_PER_KEY = 200

FEED_DESCRIPTIONS = [
    "오늘의 점심 기록",
    "주말 산책 다녀왔어요",
    "새로 산 카메라로 찍어봤습니다",
    "비 오는 날의 카페",
    "운동 30일째 인증",
]

FEED_TAGS = ["일상", "여행", "맛집", "카페", "운동", "사진", "고양이", "강아지"]

FEED_IMAGES = [
    "https://cdn.loadtest.kr/feeds/sample1.jpg",
    "https://cdn.loadtest.kr/feeds/sample2.png",
    "https://cdn.loadtest.kr/feeds/sample3.webp",
]

COMMENT_CONTENTS = [
    "멋져요!",
    "저도 가보고 싶네요",
    "사진 잘 나왔어요",
    "좋은 하루 보내세요",
]

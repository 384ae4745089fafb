"""태그 정규화 및 태그 동기화 계획(plan_tag_sync) 단위 테스트."""

import pytest

from models.tag_models import normalize_tag_names, plan_tag_sync


def test_normalize_strips_hash_whitespace_and_duplicates():
    assert normalize_tag_names([" #여행 ", "여행", "", "  ", "#맛집", "카페"]) == [
        "여행",
        "맛집",
        "카페",
    ]


def test_normalize_handles_none():
    assert normalize_tag_names(None) == []


def test_plan_replaces_one_tag():
    to_add, to_remove = plan_tag_sync({1, 2, 3}, [2, 3, 4])
    assert to_add == [4]
    assert to_remove == [1]


def test_plan_with_empty_desired_removes_everything():
    to_add, to_remove = plan_tag_sync({1, 2}, [])
    assert to_add == []
    assert to_remove == [1, 2]


def test_plan_is_noop_for_same_set():
    assert plan_tag_sync({1, 2}, [2, 1, 1]) == ([], [])


def test_plan_keeps_desired_order_for_additions():
    to_add, _ = plan_tag_sync(set(), [30, 10, 20])
    assert to_add == [30, 10, 20]


def test_plan_keeps_mapper_when_names_resolve_to_same_tag():
    # 'Python' -> 'python' 처럼 같은 태그 행으로 해석된 요청은 아무 것도 바꾸지 않는다
    assert plan_tag_sync({7}, [7]) == ([], [])
    assert plan_tag_sync({7}, [7, 7]) == ([], [])


@pytest.mark.parametrize(
    "current, desired",
    [
        (set(), [1]),
        ({1}, []),
        ({1, 2, 3}, [3, 4, 5, 4]),
        ({1, 2, 3}, [1, 2, 3]),
    ],
)
def test_plan_postcondition_matches_desired_set(current, desired):
    to_add, to_remove = plan_tag_sync(current, desired)
    result = (set(current) - set(to_remove)) | set(to_add)
    assert result == set(desired)
    # 이미 연결된 태그를 다시 추가하지 않는다
    assert not set(to_add) & set(current)

import pytest

from app.core.exceptions import InvalidParameterError
from app.core.pagination import MAX_OFFSET, PageWindow, resolve


class TestResolve:
    def test_defaults(self):
        window = resolve()
        assert window == PageWindow(start=0, end=19)
        assert window.limit == 20

    def test_second_page_of_ten(self):
        window = resolve(page=2, per_page=10)
        assert (window.start, window.end) == (10, 19)
        assert window.offset == 10
        assert window.limit == 10

    @pytest.mark.parametrize("page", [1, 2, 3, 17])
    @pytest.mark.parametrize("per_page", [1, 7, 20, 100])
    def test_window_is_exactly_one_page(self, page, per_page):
        window = resolve(page, per_page)
        assert window.start == (page - 1) * per_page
        assert window.limit == per_page
        assert window.end - window.start + 1 == per_page

    def test_consecutive_pages_are_adjacent(self):
        first = resolve(1, 25)
        second = resolve(2, 25)
        assert second.start == first.end + 1

    def test_custom_defaults(self):
        assert resolve(default_page=3, default_per_page=5) == PageWindow(10, 14)

    @pytest.mark.parametrize(
        "page,per_page,fields",
        [
            (0, 20, ["page"]),
            (-3, 20, ["page"]),
            (1, 0, ["per_page"]),
            (0, -1, ["page", "per_page"]),
        ],
    )
    def test_rejects_non_positive(self, page, per_page, fields):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve(page, per_page)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["fields"] == fields
        for field in fields:
            assert field in exc_info.value.message

    @pytest.mark.parametrize(
        "page,per_page",
        [
            (10**18, 100),
            (1, 2**64),
            (2**63 + 1, 1),
        ],
    )
    def test_rejects_window_past_max_offset(self, page, per_page):
        with pytest.raises(InvalidParameterError) as exc_info:
            resolve(page, per_page)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details["fields"] == ["page", "per_page"]

    def test_last_representable_window(self):
        window = resolve(2**63 // 100, 100)
        assert window.end <= MAX_OFFSET
        assert window.limit == 100

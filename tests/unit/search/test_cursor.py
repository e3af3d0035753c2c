"""Unit tests for the scroll cursor codec."""
from __future__ import annotations

import base64
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mp_search.kernel.errors import InvalidScrollCursorError
from mp_search.search.cursor import ScrollCursor

sort_value = st.one_of(
    st.integers(),
    st.floats(allow_nan=False),
    st.text(),
    st.booleans(),
    st.none(),
)


def _token(payload: object) -> str:
    return base64.urlsafe_b64encode(json.dumps(payload).encode()).decode()


class TestRoundTrip:
    @given(
        sort_values=st.lists(sort_value, min_size=1, max_size=5).map(tuple),
        session_id=st.one_of(st.none(), st.text()),
        expires_at=st.integers(min_value=0, max_value=2**53),
    )
    def test_decode_inverts_encode(self, sort_values: tuple, session_id: str | None, expires_at: int) -> None:
        cursor = ScrollCursor(sort_values, session_id, expires_at)
        decoded = ScrollCursor.decode(cursor.encode())
        assert decoded == cursor
        assert [type(v) for v in decoded.sort_values] == [type(v) for v in sort_values]

    def test_typical_cursor(self) -> None:
        cursor = ScrollCursor((12.5, "urn:li:dataset:1"), "pit-abc", 1_767_269_100_000)
        assert ScrollCursor.decode(cursor.encode()) == cursor

    def test_token_is_url_safe_text(self) -> None:
        token = ScrollCursor(("a/b+c",), "?&=", 0).encode()
        assert token.isascii()
        assert "+" not in token
        assert "/" not in token


class TestCursorInvariants:
    def test_empty_sort_values_rejected(self) -> None:
        with pytest.raises(ValueError):
            ScrollCursor(())

    def test_defaults(self) -> None:
        cursor = ScrollCursor((1,))
        assert cursor.session_id is None
        assert cursor.expires_at_epoch_ms == 0

    def test_is_expired(self) -> None:
        cursor = ScrollCursor((1,), "pit", 1_000)
        assert not cursor.is_expired(999)
        assert cursor.is_expired(1_000)

    def test_zero_expiration_never_expires(self) -> None:
        assert not ScrollCursor((1,)).is_expired(10**15)

    @pytest.mark.parametrize("nested", [(1, 2), [1, 2], {"a": 1}])
    def test_nested_sort_values_rejected(self, nested: object) -> None:
        with pytest.raises(ValueError, match="JSON scalars"):
            ScrollCursor((nested, "x"))


class TestDecodeErrors:
    @pytest.mark.parametrize("token", ["", "not base64 at all!", "é", base64.urlsafe_b64encode(b"\xff\xfe").decode()])
    def test_garbage_tokens(self, token: str) -> None:
        with pytest.raises(InvalidScrollCursorError):
            ScrollCursor.decode(token)

    def test_not_an_object(self) -> None:
        with pytest.raises(InvalidScrollCursorError, match="not an object"):
            ScrollCursor.decode(_token([1, 2]))

    def test_missing_sort(self) -> None:
        with pytest.raises(InvalidScrollCursorError, match="missing sort values"):
            ScrollCursor.decode(_token({"pitId": None, "expirationTime": 0}))

    def test_empty_sort(self) -> None:
        with pytest.raises(InvalidScrollCursorError):
            ScrollCursor.decode(_token({"sort": [], "pitId": None, "expirationTime": 0}))

    def test_nested_sort_value(self) -> None:
        with pytest.raises(InvalidScrollCursorError, match="scalars"):
            ScrollCursor.decode(_token({"sort": [[1, 2], "x"], "pitId": None, "expirationTime": 0}))

    def test_bad_session_type(self) -> None:
        with pytest.raises(InvalidScrollCursorError):
            ScrollCursor.decode(_token({"sort": [1], "pitId": 7, "expirationTime": 0}))

    def test_bad_expiration_type(self) -> None:
        with pytest.raises(InvalidScrollCursorError):
            ScrollCursor.decode(_token({"sort": [1], "pitId": None, "expirationTime": "soon"}))

    def test_error_code(self) -> None:
        with pytest.raises(InvalidScrollCursorError) as exc_info:
            ScrollCursor.decode("")
        assert exc_info.value.code == "invalid_scroll_cursor"

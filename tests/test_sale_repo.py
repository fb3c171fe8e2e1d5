"""Tests for sale repository queries and predicate-to-SQL translation."""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from salesdesk.database import sale_repo
from salesdesk.database.predicate_sql import escape_like
from salesdesk.errors import StoreError
from salesdesk.query.builder import SortKey, build_filter_spec
from salesdesk.query.predicates import And, Equals, Or


def _ids(session, params):
    spec = build_filter_spec(params, default_limit=100)
    rows = sale_repo.query_sales_window(session, spec.predicate, spec.sort, spec.offset, spec.limit)
    return [row.id for row in rows]


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"


def test_unconstrained_filter_counts_everything(session, make_sale):
    for i in range(3):
        make_sale(transaction_id=i)

    assert sale_repo.count_sales(session, And(())) == 3


def test_search_is_literal_and_case_insensitive(session, make_sale):
    dotted = make_sale(customer_name="Data.Bank Traders")
    make_sale(customer_name="Alba Rose")  # "a.b" as a wildcard would match "lba"
    by_phone = make_sale(customer_name="Nobody", phone_number="555-A.B-01")

    assert sorted(_ids(session, {"search": "A.B"})) == sorted([dotted, by_phone])



def test_search_folds_case_beyond_ascii(session, make_sale):
    elodie = make_sale(customer_name="\u00c9LODIE Martin")
    make_sale(customer_name="Elodie Roy")

    assert _ids(session, {"search": "\u00c9LODIE"}) == [elodie]
    assert _ids(session, {"search": "\u00e9lodie"}) == [elodie]
    assert sale_repo.count_sales(session, build_filter_spec({"search": "\u00e9lodie m"}).predicate) == 1


@pytest.mark.parametrize("term", ["100%", "a_b", "back\\slash", "(x", "[y]", "*"])
def test_search_with_special_characters_does_not_fail(session, make_sale, term):
    literal = make_sale(customer_name=f"pre {term} post")
    make_sale(customer_name="plain name")

    assert _ids(session, {"search": term}) == [literal]


def test_inset_filters(session, make_sale):
    north = make_sale(customer_region="North", gender="Male")
    south = make_sale(customer_region="South", gender="Female")
    make_sale(customer_region="East", gender="Female")

    assert sorted(_ids(session, {"regions": "North,South"})) == sorted([north, south])
    assert _ids(session, {"regions": "North,South", "genders": "Female"}) == [south]


def test_tags_match_any_intersection(session, make_sale):
    both = make_sale(tags=["smart", "wireless"])
    one = make_sale(tags=["portable"])
    make_sale(tags=["cotton"])
    make_sale(tags=[])

    assert sorted(_ids(session, {"tags": "wireless,portable"})) == sorted([both, one])
    assert sale_repo.count_sales(session, Equals("tags", "smart")) == 1


@pytest.mark.parametrize(
    "params, expected_ages",
    [
        ({"minAge": "20", "maxAge": "30"}, [20, 25, 30]),
        ({"minAge": "26"}, [30, 41]),
        ({"maxAge": "19"}, [19]),
    ],
)
def test_age_range(session, make_sale, params, expected_ages):
    for age in (19, 20, 25, 30, 41):
        make_sale(age=age)

    rows = sale_repo.query_sales_window(
        session, build_filter_spec(params).predicate, SortKey("age", False), 0, 100
    )
    assert [row.age for row in rows] == expected_ages


def test_date_range_is_inclusive(session, make_sale):
    make_sale(date=datetime(2022, 12, 31))
    first = make_sale(date=datetime(2023, 1, 1))
    last = make_sale(date=datetime(2023, 1, 31))
    make_sale(date=datetime(2023, 2, 1))

    assert sorted(_ids(session, {"startDate": "2023-01-01", "endDate": "2023-01-31"})) == sorted([first, last])


def test_sort_with_id_tiebreak(session, make_sale):
    a = make_sale(final_amount=50.0)
    b = make_sale(final_amount=10.0)
    c = make_sale(final_amount=50.0)

    assert _ids(session, {"sortBy": "finalAmount", "sortOrder": "desc"}) == [a, c, b]
    assert _ids(session, {"sortBy": "finalAmount", "sortOrder": "asc"}) == [b, a, c]


def test_default_sort_is_newest_first(session, make_sale):
    old = make_sale(date=datetime(2021, 1, 1))
    new = make_sale(date=datetime(2024, 1, 1))

    assert _ids(session, {}) == [new, old]


def test_window_offset_and_limit(session, make_sale):
    ids = [make_sale(transaction_id=i) for i in range(7)]

    rows = sale_repo.query_sales_window(session, And(()), SortKey("transactionId", False), 5, 5)
    assert [row.id for row in rows] == ids[5:]


def test_empty_or_matches_nothing(session, make_sale):
    make_sale()
    assert sale_repo.count_sales(session, Or(())) == 0


def test_find_sale_and_tags(session, make_sale):
    sale_id = make_sale(tags=["casual", "cotton"], customer_name="Meera")

    row = sale_repo.find_sale_by_id(session, sale_id)
    assert row.customer_name == "Meera"
    assert sale_repo.load_tags_by_sale(session, [sale_id])[sale_id] == ["casual", "cotton"]
    assert sale_repo.find_sale_by_id(session, sale_id + 1000) is None
    assert sale_repo.load_tags_by_sale(session, []) == {}


def test_store_failures_become_store_error(session, monkeypatch):
    def broken_query(*_args, **_kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    monkeypatch.setattr(session, "query", broken_query)

    with pytest.raises(StoreError):
        sale_repo.count_sales(session, And(()))
    with pytest.raises(StoreError):
        sale_repo.query_sales_window(session, And(()), SortKey(), 0, 10)


def test_window_past_integer_range_is_empty(session, make_sale):
    make_sale()

    assert sale_repo.query_sales_window(session, And(()), SortKey(), 2**63, 10) == []

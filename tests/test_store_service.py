import pytest
from sqlalchemy import event
from sqlalchemy.exc import IntegrityError

from store_rating.core.exceptions import DuplicateEmailError, ValidationError
from store_rating.models.user import Role

from conftest import make_name


def test_create_store_trims_fields(store_service):
    store = store_service.create_store(
        name="  " + make_name("Corner Bakery", 30) + " ",
        email="bakery@example.com",
        address="  5 Baker Street ",
    )
    assert store.name == make_name("Corner Bakery", 30)
    assert store.address == "5 Baker Street"
    assert store.created_at is not None


@pytest.mark.parametrize(
    "fields, message",
    [
        ({"name": "Too short", "email": "s@example.com", "address": "addr"}, "Name must be at least 20 characters long"),
        ({"name": "a" * 30, "email": "not-an-email", "address": "addr"}, "Email must be in valid format"),
        ({"name": "a" * 30, "email": "s@example.com", "address": "   "}, "Address cannot be empty"),
    ],
)
def test_invalid_fields_create_nothing(store_service, data, fields, message):
    with pytest.raises(ValidationError) as exc_info:
        store_service.create_store(**fields)
    assert exc_info.value.message == message
    assert data.stores.count() == 0


def test_duplicate_store_email(create_store, data):
    create_store(email="shop@example.com")
    with pytest.raises(DuplicateEmailError) as exc_info:
        create_store(email="shop@example.com")
    assert exc_info.value.message == "Store email already exists"
    assert data.stores.count() == 1


def test_store_and_user_emails_are_independent(create_store, create_user):
    create_store(email="shared@example.com")
    create_user(email="shared@example.com")


def test_database_constraint_is_final_guard_for_store_email(store_service, data, monkeypatch):
    store_service.create_store(name="a" * 30, email="race@example.com", address="addr")
    monkeypatch.setattr(data.stores, "get_by_email", lambda email: None)

    with pytest.raises(DuplicateEmailError):
        store_service.create_store(name="b" * 30, email="race@example.com", address="addr")
    assert data.stores.count() == 1


def test_get_store_by_id(create_store, store_service):
    store = create_store()
    assert store_service.get_store_by_id(store.id).email == store.email
    assert store_service.get_store_by_id(9999) is None


class TestGetAllStores:
    @pytest.fixture
    def stores(self, create_store):
        return [
            create_store(name=make_name("Green Grocer", 30), email="green@shops.com", address="12 Market Road"),
            create_store(name=make_name("Blue Books", 30), email="blue@books.org", address="7 Green Lane"),
            create_store(name=make_name("Red Hardware", 30), email="red@shops.com", address="99 Iron Street"),
        ]

    def test_default_order_is_newest_first(self, stores, store_service):
        assert [s.id for s in store_service.get_all_stores()] == [s.id for s in reversed(stores)]

    def test_individual_filters(self, stores, store_service):
        assert [s.email for s in store_service.get_all_stores(name="grocer")] == ["green@shops.com"]
        assert {s.email for s in store_service.get_all_stores(email="SHOPS")} == {"green@shops.com", "red@shops.com"}
        assert [s.email for s in store_service.get_all_stores(address="iron")] == ["red@shops.com"]

    def test_search_matches_name_or_address(self, stores, store_service):
        result = {s.email for s in store_service.get_all_stores(search="GREEN")}
        assert result == {"green@shops.com", "blue@books.org"}

    def test_search_suppresses_individual_filters(self, stores, store_service):
        # the email filter alone would match nothing
        result = {s.email for s in store_service.get_all_stores(search="green", email="nomatch")}
        assert result == {"green@shops.com", "blue@books.org"}

    def test_sort_by_name(self, stores, store_service):
        ascending = [s.email for s in store_service.get_all_stores(sort_by="name", sort_order="asc")]
        assert ascending == ["blue@books.org", "green@shops.com", "red@shops.com"]
        descending = [s.email for s in store_service.get_all_stores(sort_by="name", sort_order="desc")]
        assert descending == list(reversed(ascending))

    def test_like_wildcards_match_literally(self, stores, create_store, store_service):
        create_store(name=make_name("100% Organic Lane", 30), email="a_b@shop.net", address="4 Percent Way")
        create_store(name=make_name("Plain Corner Shop", 30), email="axb@shop.net", address="5 Plain Way")

        assert [s.email for s in store_service.get_all_stores(search="%")] == ["a_b@shop.net"]
        assert store_service.get_all_stores(search="_") == []
        assert [s.email for s in store_service.get_all_stores(email="a_b")] == ["a_b@shop.net"]
        assert [s.email for s in store_service.get_all_stores(name="0%")] == ["a_b@shop.net"]

    def test_invalid_sort_field(self, stores, store_service):
        with pytest.raises(ValidationError):
            store_service.get_all_stores(sort_by="address")


class TestAverageRating:
    @pytest.mark.parametrize(
        "values",
        [[4], [1, 5], [1, 2, 2], [3, 3, 3, 3], [5, 4, 4, 1, 2, 3, 5], [1] * 9 + [2], [5, 5, 4]],
    )
    def test_matches_arithmetic_mean(self, values, create_store, create_user, rating_service, store_service):
        store = create_store()
        for value in values:
            rating_service.create_rating(create_user().id, store.id, value)

        average = store_service.calculate_average_rating(store.id)
        assert isinstance(average, float)
        assert average == pytest.approx(sum(values) / len(values), abs=1e-4)

    def test_none_without_ratings(self, create_store, store_service):
        store = create_store()
        assert store_service.calculate_average_rating(store.id) is None

    def test_only_counts_own_store(self, create_store, create_user, rating_service, store_service):
        first, second = create_store(), create_store()
        user = create_user()
        rating_service.create_rating(user.id, first.id, 1)
        rating_service.create_rating(user.id, second.id, 5)
        assert store_service.calculate_average_rating(first.id) == pytest.approx(1.0)
        assert store_service.calculate_average_rating(second.id) == pytest.approx(5.0)


class TestStoreWithRatings:
    def test_without_ratings(self, create_store, create_user, store_service):
        store = create_store()
        user = create_user()
        result = store_service.get_store_with_ratings(store.id, user.id)
        assert result.average_rating is None
        assert result.total_ratings == 0
        assert result.user_rating is None

    def test_user_rating_only_for_the_caller(self, create_store, create_user, rating_service, store_service):
        store = create_store()
        rater, other = create_user(), create_user()
        rating = rating_service.create_rating(rater.id, store.id, 4)

        mine = store_service.get_store_with_ratings(store.id, rater.id)
        assert mine.user_rating.id == rating.id
        assert mine.user_rating.value == 4

        assert store_service.get_store_with_ratings(store.id, other.id).user_rating is None
        assert store_service.get_store_with_ratings(store.id).user_rating is None

    def test_reflects_latest_value(self, create_store, create_user, rating_service, store_service):
        store = create_store()
        user = create_user()
        rating = rating_service.create_rating(user.id, store.id, 2)
        rating_service.update_rating(rating.id, user.id, 5)

        result = store_service.get_store_with_ratings(store.id, user.id)
        assert result.average_rating == pytest.approx(5.0)
        assert result.total_ratings == 1
        assert result.user_rating.value == 5

    def test_missing_store(self, store_service):
        assert store_service.get_store_with_ratings(9999) is None

    def test_listing_includes_rating_summaries(self, create_store, create_user, rating_service, store_service):
        rated, unrated = create_store(), create_store()
        user, other = create_user(), create_user()
        rating_service.create_rating(user.id, rated.id, 3)
        rating_service.create_rating(other.id, rated.id, 5)

        listed = {s.id: s for s in store_service.get_all_stores_with_ratings(user_id=user.id)}
        assert listed[rated.id].average_rating == pytest.approx(4.0)
        assert listed[rated.id].total_ratings == 2
        assert listed[rated.id].user_rating.value == 3
        assert listed[unrated.id].average_rating is None
        assert listed[unrated.id].user_rating is None
        assert listed[unrated.id].total_ratings == 0

    def test_listing_query_count_does_not_grow_with_stores(self, engine, create_store, create_user, rating_service, store_service):
        user = create_user()
        statements = []

        def record(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        def listing_statements():
            statements.clear()
            event.listen(engine, "before_cursor_execute", record)
            try:
                store_service.get_all_stores_with_ratings(user_id=user.id)
            finally:
                event.remove(engine, "before_cursor_execute", record)
            return len(statements)

        for _ in range(2):
            rating_service.create_rating(user.id, create_store().id, 4)
        few = listing_statements()

        for _ in range(4):
            rating_service.create_rating(user.id, create_store().id, 2)
        create_store()
        assert listing_statements() == few

    def test_aggregate_for_stores(self, create_store, create_user, rating_service, data):
        first, second, empty = create_store(), create_store(), create_store()
        rater, other = create_user(), create_user()
        rating_service.create_rating(rater.id, first.id, 2)
        rating_service.create_rating(other.id, first.id, 5)
        rating_service.create_rating(rater.id, second.id, 1)

        aggregates = data.ratings.aggregate_for_stores([first.id, second.id, empty.id])
        assert aggregates[first.id] == (pytest.approx(3.5), 2)
        assert aggregates[second.id] == (pytest.approx(1.0), 1)
        assert empty.id not in aggregates
        assert data.ratings.aggregate_for_stores([]) == {}


def test_deleting_store_removes_ratings_and_unlinks_owner(create_store, create_user, rating_service, data):
    store = create_store()
    owner = create_user(role=Role.STORE_OWNER, store_id=store.id)
    rating_service.create_rating(create_user().id, store.id, 4)

    data.stores.delete(data.stores.get(store.id))
    data.db.expire_all()

    assert data.ratings.count() == 0
    assert data.users.get(owner.id).store_id is None


def test_raw_duplicate_store_insert_hits_unique_constraint(create_store, data):
    create_store(email="raw@example.com")
    with pytest.raises(IntegrityError):
        data.stores.create(name="c" * 30, email="raw@example.com", address="addr")

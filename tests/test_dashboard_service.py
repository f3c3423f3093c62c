import pytest

from store_rating.core.exceptions import ForbiddenError, UserNotFoundError
from store_rating.models.user import Role


def test_admin_stats_counts_everything(create_user, create_store, rating_service, dashboard_service):
    assert dashboard_service.get_admin_stats().model_dump() == {"total_users": 0, "total_stores": 0, "total_ratings": 0}

    users = [create_user() for _ in range(3)]
    stores = [create_store() for _ in range(2)]
    for user in users:
        rating_service.create_rating(user.id, stores[0].id, 3)
    rating_service.create_rating(users[0].id, stores[1].id, 5)

    stats = dashboard_service.get_admin_stats()
    assert stats.total_users == 3
    assert stats.total_stores == 2
    assert stats.total_ratings == 4


class TestOwnerStats:
    def test_scoped_to_own_store(self, create_user, create_store, rating_service, dashboard_service):
        own, other = create_store(), create_store()
        owner = create_user(role=Role.STORE_OWNER, store_id=own.id)
        first, second = create_user(), create_user()

        rating_service.create_rating(first.id, own.id, 2)
        latest = rating_service.create_rating(second.id, own.id, 5)
        rating_service.create_rating(first.id, other.id, 1)

        stats = dashboard_service.get_owner_stats(owner.id)
        assert stats.average_rating == pytest.approx(3.5)
        assert stats.total_ratings == 2
        assert len(stats.ratings) == 2
        assert stats.ratings[0].id == latest.id
        assert stats.ratings[0].user_name == second.name
        assert stats.ratings[0].user_email == second.email

        other_ids = {r.id for r in rating_service.get_ratings_for_store(other.id)}
        assert not other_ids & {r.id for r in stats.ratings}

    def test_store_without_ratings(self, create_user, create_store, dashboard_service):
        owner = create_user(role=Role.STORE_OWNER, store_id=create_store().id)
        stats = dashboard_service.get_owner_stats(owner.id)
        assert stats.average_rating is None
        assert stats.total_ratings == 0
        assert stats.ratings == []

    def test_unknown_user(self, dashboard_service):
        with pytest.raises(UserNotFoundError):
            dashboard_service.get_owner_stats(9999)

    def test_not_a_store_owner(self, create_user, dashboard_service):
        with pytest.raises(ForbiddenError) as exc_info:
            dashboard_service.get_owner_stats(create_user().id)
        assert exc_info.value.message == "User is not a store owner"

    def test_owner_without_store(self, create_user, dashboard_service):
        owner = create_user(role=Role.STORE_OWNER)
        with pytest.raises(ForbiddenError) as exc_info:
            dashboard_service.get_owner_stats(owner.id)
        assert exc_info.value.message == "Store owner has no associated store"

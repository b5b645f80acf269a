"""Model-bound data source tests."""
import pytest
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import load_only

from datapipe.exceptions import ConfigurationError, NotFoundError
from datapipe.source import DBSource, Params
from datapipe.source.db import _SQLSource
from tests.models import Membership, User, UserCreate


class TestBinding:
    """Test key column resolution at construction."""

    def test_primary_key_inferred(self, source):
        assert source.key_name == "id"
        assert source.strict_update is False

    def test_explicit_key_by_name(self, session_factory):
        assert DBSource(session_factory, User, key="user_id").key_name == "user_id"

    def test_explicit_key_by_attribute(self, session_factory):
        assert DBSource(session_factory, User, key=User.email).key_name == "email"

    def test_unknown_key_rejected(self, session_factory):
        with pytest.raises(ConfigurationError):
            DBSource(session_factory, User, key="missing")

    def test_composite_primary_key_needs_explicit_key(self, session_factory):
        with pytest.raises(ConfigurationError):
            DBSource(session_factory, Membership)
        assert DBSource(session_factory, Membership, key="user_id").key_name == "user_id"

    def test_unmapped_model_rejected(self, session_factory):
        with pytest.raises(ConfigurationError):
            DBSource(session_factory, UserCreate)


@pytest.mark.usefixtures("sample_users")
class TestGetItem:
    """Test single-row fetch."""

    def test_found(self, source):
        user = source.get_item(3)

        assert isinstance(user, User)
        assert user.id == 3
        assert user.nickname == "user03"
        assert user.email == "user03@example.com"

    def test_missing_key_raises_not_found(self, source):
        with pytest.raises(NotFoundError) as exc_info:
            source.get_item(404)

        assert exc_info.value.key == 404
        assert exc_info.value.target == "User"
        assert exc_info.value.status_code == 404

    def test_by_non_primary_key(self, session_factory):
        by_user_id = DBSource(session_factory, User, key="user_id")

        assert by_user_id.get_item(1005).id == 5


class TestStore:
    """Test insert."""

    def test_round_trip(self, source):
        user = User(user_id=77, nickname="zhangsan", sex=1, phone="13654654512", email="22@qq.com")
        stored = source.store(user)

        assert stored is user
        assert user.id is not None
        fetched = source.get_item(user.id)
        assert fetched.model_dump() == user.model_dump()

    def test_generated_key_follows_existing_rows(self, source, sample_users):
        user = source.store(User(nickname="next"))

        assert user.id == len(sample_users) + 1

    def test_store_error_propagates_unchanged(self, source, sample_users):
        with pytest.raises(IntegrityError):
            source.store(User(id=1, nickname="duplicate"))


@pytest.mark.usefixtures("sample_users")
class TestUpdate:
    """Test partial update by key."""

    def test_only_non_default_fields_written(self, source):
        affected = source.update(4, User(nickname="renamed"))

        assert affected == 1
        user = source.get_item(4)
        assert user.nickname == "renamed"
        assert user.email == "user04@example.com"
        assert user.sex == 2

    def test_key_field_on_item_is_ignored(self, source):
        source.update(4, User(id=99, nickname="renamed"))

        assert source.get_item(4).nickname == "renamed"
        with pytest.raises(NotFoundError):
            source.get_item(99)

    def test_missing_key_is_silent_no_op(self, source):
        assert source.update(404, User(nickname="ghost")) == 0

    def test_missing_key_in_strict_mode_raises(self, strict_source):
        with pytest.raises(NotFoundError):
            strict_source.update(404, User(nickname="ghost"))

    def test_strict_mode_updates_existing_row(self, strict_source):
        assert strict_source.update(2, User(phone="110")) == 1
        assert strict_source.get_item(2).phone == "110"

    def test_nothing_to_write(self, source, session_factory):
        before = session_factory.opened

        assert source.update(1, User()) == 0
        assert session_factory.opened == before

    def test_nothing_to_write_in_strict_mode_checks_key(self, strict_source):
        assert strict_source.update(1, User()) == 0

        with pytest.raises(NotFoundError):
            strict_source.update(404, User())


@pytest.mark.usefixtures("sample_users")
class TestDelete:
    """Test delete by key."""

    def test_delete_then_get_raises_not_found(self, source):
        assert source.delete(7) == 1

        with pytest.raises(NotFoundError):
            source.get_item(7)
        assert source.get_list().get_page_meta().total == 11

    def test_delete_missing_key(self, source):
        assert source.delete(404) == 0


@pytest.mark.usefixtures("sample_users")
class TestScopes:
    """Test query modifiers on a model source."""

    def test_filter_then_projection(self, source):
        params = Params().with_scopes(
            lambda stmt: stmt.where(User.sex == 1),
            lambda stmt: stmt.options(load_only(User.id, User.nickname)),
        )
        users = source.get_list(params).get_data()

        assert [user.nickname for user in users] == ["user01", "user03", "user05", "user07", "user09", "user11"]
        assert "email" in sa_inspect(users[0]).unloaded

    def test_scopes_apply_in_declaration_order(self, source):
        params = Params().with_page(1, 3).with_scopes(
            lambda stmt: stmt.order_by(User.sex.desc()),
            lambda stmt: stmt.order_by(User.id.desc()),
        )
        data = source.get_list(params)

        assert [user.id for user in data.get_data()] == [12, 10, 8]
        assert data.get_page_meta().total == 12


def test_source_must_define_select_and_fetch(session_factory):
    class CrudOnly(_SQLSource):
        def get_item(self, key):
            return None

        def store(self, item):
            return item

        def update(self, key, item):
            return 0

        def delete(self, key):
            return 0

    with pytest.raises(TypeError, match="_fetch"):
        CrudOnly(session_factory)

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import DuplicateKeyError, NotFoundError, StorageError
from app.models.student import Student


class TestInsertAndFind:

    def test_insert_assigns_id_and_timestamps(self, store, student_data):
        student = store.insert(student_data)
        assert student.id == 1
        assert student.created_at is not None
        assert student.updated_at == student.created_at
        assert student.deleted_at is None

    def test_insert_ignores_system_fields(self, store, student_data):
        student = store.insert(dict(student_data, id=99, deleted_at="yesterday"))
        assert student.id == 1
        assert student.deleted_at is None

    def test_duplicate_live_email(self, store, student_data):
        store.insert(student_data)
        with pytest.raises(DuplicateKeyError) as exc_info:
            store.insert(dict(student_data, name="Someone Else"))
        assert exc_info.value.field == "email"

    def test_store_usable_after_duplicate(self, store, student_data, make_student_data):
        store.insert(student_data)
        with pytest.raises(DuplicateKeyError):
            store.insert(student_data)
        assert store.insert(make_student_data()).id is not None
        assert len(store.find_all()) == 2

    def test_find_by_id_missing(self, store):
        with pytest.raises(NotFoundError):
            store.find_by_id(42)

    def test_find_all_ordered_by_id(self, store, make_student_data):
        ids = [store.insert(make_student_data()).id for _ in range(3)]
        assert [s.id for s in store.find_all()] == ids

    def test_find_all_offset_limit(self, store, make_student_data):
        ids = [store.insert(make_student_data()).id for _ in range(5)]
        assert [s.id for s in store.find_all(skip=1, limit=2)] == ids[1:3]

    def test_find_by_email_excludes_own_id(self, store, student_data):
        student = store.insert(student_data)
        assert store.find_by_email(student_data["email"]).id == student.id
        assert store.find_by_email(student_data["email"], exclude_id=student.id) is None


class TestSearch:

    @pytest.fixture
    def populated(self, store, make_student_data):
        store.insert(make_student_data(name="Alice Smith", major="Computer Science", grade="2023"))
        store.insert(make_student_data(name="alan turing", major="Mathematics", grade="2023"))
        store.insert(make_student_data(name="Bob", major="computer engineering", grade="2024"))
        return store

    def test_name_is_case_insensitive_substring(self, populated):
        names = [s.name for s in populated.find(name="AL")]
        assert names == ["Alice Smith", "alan turing"]

    def test_filters_are_anded(self, populated):
        result = populated.find(name="a", major="computer")
        assert [s.name for s in result] == ["Alice Smith"]

    def test_grade_is_exact(self, populated):
        assert len(populated.find(grade="2023")) == 2
        assert populated.find(grade="202") == []

    def test_no_filters_returns_everything(self, populated):
        assert [s.id for s in populated.find()] == [s.id for s in populated.find_all()]

    def test_non_ascii_letters_fold_case(self, store, make_student_data):
        store.insert(make_student_data(name="Émile Zola"))
        store.insert(make_student_data(name="Ødegaard"))
        assert [s.name for s in store.find(name="émile")] == ["Émile Zola"]
        assert [s.name for s in store.find(name="ØDE")] == ["Ødegaard"]

    def test_like_wildcards_match_literally(self, store, make_student_data):
        store.insert(make_student_data(name="100% Real"))
        store.insert(make_student_data(name="1000 Real"))
        store.insert(make_student_data(name="snake_case"))
        store.insert(make_student_data(name="snakeXcase"))
        assert [s.name for s in store.find(name="0%")] == ["100% Real"]
        assert [s.name for s in store.find(name="e_c")] == ["snake_case"]


class TestUpdate:

    def test_updates_only_given_fields(self, store, student_data):
        student = store.insert(student_data)
        before = student.updated_at

        updated = store.update_fields(student.id, {"age": 21})

        assert updated.age == 21
        assert updated.name == student_data["name"]
        assert updated.email == student_data["email"]
        assert updated.updated_at > before

    def test_same_email_on_self_is_fine(self, store, student_data):
        student = store.insert(student_data)
        updated = store.update_fields(student.id, {"email": student_data["email"]})
        assert updated.email == student_data["email"]

    def test_email_collision(self, store, student_data, make_student_data):
        store.insert(student_data)
        other = store.insert(make_student_data())
        with pytest.raises(DuplicateKeyError):
            store.update_fields(other.id, {"email": student_data["email"]})

    def test_missing_id(self, store):
        with pytest.raises(NotFoundError):
            store.update_fields(7, {"age": 30})


class TestSoftDelete:

    def test_deleted_record_is_invisible(self, store, student_data):
        student = store.insert(student_data)
        store.soft_delete(student.id)

        with pytest.raises(NotFoundError):
            store.find_by_id(student.id)
        assert store.find_all() == []
        assert store.find(name="Zhang") == []
        assert store.find_by_email(student_data["email"]) is None

    def test_row_is_kept(self, store, db, student_data):
        student = store.insert(student_data)
        store.soft_delete(student.id)

        row = db.query(Student).filter(Student.id == student.id).one()
        assert row.deleted_at is not None
        assert row.is_deleted

    def test_delete_twice_is_not_found(self, store, student_data):
        student = store.insert(student_data)
        store.soft_delete(student.id)
        with pytest.raises(NotFoundError):
            store.soft_delete(student.id)

    def test_email_reusable_after_delete(self, store, student_data):
        first = store.insert(student_data)
        store.soft_delete(first.id)

        second = store.insert(student_data)
        assert second.id != first.id


class TestStorageErrors:

    def test_database_failure_becomes_storage_error(self, store, db, monkeypatch):
        def broken_query(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db, "query", broken_query)

        with pytest.raises(StorageError):
            store.find_all()

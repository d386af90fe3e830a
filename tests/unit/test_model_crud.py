from __future__ import annotations

from datetime import datetime

import pytest

from dynamodel.errors import CallbackHaltedError, ErrorKind, NotFoundError, ValidationError
from dynamodel.models import CallbackEvent, define_dynamo_model, format, required


def _trim_name(record):
    if isinstance(record.get("name"), str):
        record["name"] = record["name"].strip()


@pytest.fixture
def users(recording_adapter):
    return (
        define_dynamo_model(recording_adapter)
        .set_table_name("users")
        .add_field("name", "string")
        .add_field("email", "string")
        .add_validation("name", required)
        .add_validation("email", format(r"^\S+@\S+\.\S+$", "Invalid email format"))
        .add_callback("beforeSave", _trim_name)
        .seal()
    )


def _parse(timestamp: str) -> datetime:
    return datetime.fromisoformat(timestamp.replace("Z", "+00:00"))


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_persists_fields_id_and_timestamps(self, users, recording_adapter) -> None:
        result = await users.create({"name": "John Doe", "email": "john@example.com"})

        assert result["name"] == "John Doe"
        assert result["email"] == "john@example.com"
        assert result["id"].startswith("use_")
        assert result["created_at"].endswith("Z")
        assert _parse(result["updated_at"]) >= _parse(result["created_at"])

        (call,) = recording_adapter.calls_to("create")
        assert call[1] == "users"
        assert set(call[2]) == {"name", "email", "created_at", "updated_at"}

    @pytest.mark.asyncio
    async def test_before_save_mutation_is_persisted(self, users, recording_adapter) -> None:
        result = await users.create({"name": "  Bob  ", "email": "bob@example.com"})

        assert result["name"] == "Bob"
        stored = await recording_adapter.find_by_id("users", result["id"])
        assert stored["name"] == "Bob"

    @pytest.mark.asyncio
    async def test_invalid_record_raises_validation_error_without_write(
        self, users, recording_adapter
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await users.create({"name": " ", "email": "invalid-email"})

        assert exc_info.value.kind is ErrorKind.VALIDATION
        assert exc_info.value.messages == ["This field is required", "Invalid email format"]
        assert recording_adapter.calls_to("create") == []

    @pytest.mark.asyncio
    async def test_before_create_returning_false_aborts(self, recording_adapter) -> None:
        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("beforeCreate", lambda record: False)
            .seal()
        )

        with pytest.raises(ValidationError) as exc_info:
            await model.create({"name": "Bob"})

        assert isinstance(exc_info.value, CallbackHaltedError)
        assert exc_info.value.kind is ErrorKind.CALLBACK_HALTED
        assert exc_info.value.messages == ["before_create callback halted the operation"]
        assert recording_adapter.calls_to("create") == []

    @pytest.mark.asyncio
    async def test_callback_order_around_persistence(self, recording_adapter) -> None:
        events = []

        def track(name):
            def callback(record):
                events.append((name, "id" in record))

            return callback

        builder = define_dynamo_model(recording_adapter).set_table_name("users")
        for event in ("after_save", "after_create", "before_save", "before_create"):
            builder.add_callback(event, track(event))
        model = builder.seal()

        await model.create({"name": "Bob"})

        assert events == [
            ("before_create", False),
            ("before_save", False),
            ("after_create", True),
            ("after_save", True),
        ]

    @pytest.mark.asyncio
    async def test_after_create_halt_surfaces_after_the_write(self, recording_adapter) -> None:
        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("after_create", lambda record: False)
            .seal()
        )

        with pytest.raises(CallbackHaltedError, match="after_create"):
            await model.create({"name": "Bob"})

        assert len(recording_adapter.calls_to("create")) == 1

    @pytest.mark.asyncio
    async def test_adapter_errors_propagate_unchanged(self, users, recording_adapter, monkeypatch) -> None:
        async def broken_create(collection, attributes):
            raise RuntimeError("table is on fire")

        monkeypatch.setattr(recording_adapter, "create", broken_create)

        with pytest.raises(RuntimeError, match="table is on fire"):
            await users.create({"name": "Bob", "email": "bob@example.com"})


class TestUpdate:
    @pytest.mark.asyncio
    async def test_update_merges_attributes_and_stamps_updated_at(
        self, users, recording_adapter
    ) -> None:
        recording_adapter.seed(
            "users",
            {"id": "1", "name": "John", "email": "john@example.com", "updated_at": "2000-01-01T00:00:00.000Z"},
        )

        result = await users.update("1", {"name": "  Jane Doe  "})

        assert result["name"] == "Jane Doe"
        assert result["email"] == "john@example.com"
        assert result["updated_at"] > "2000-01-01T00:00:00.000Z"
        (call,) = recording_adapter.calls_to("update")
        assert call[1:3] == ("users", "1")
        assert set(call[3]) == {"name", "updated_at"}

    @pytest.mark.asyncio
    async def test_partial_update_only_validates_submitted_fields(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John", "email": "john@example.com"})

        result = await users.update("1", {"email": "new@example.com"})

        assert result["email"] == "new@example.com"

    @pytest.mark.asyncio
    async def test_invalid_update_raises_before_write(self, users, recording_adapter) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await users.update("1", {"name": "", "email": "invalid-email"})

        assert exc_info.value.messages == ["This field is required", "Invalid email format"]
        assert recording_adapter.calls_to("update") == []

    @pytest.mark.asyncio
    async def test_update_of_missing_record_raises_not_found(self, users) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await users.update("nope", {"name": "Jane"})

        assert exc_info.value.collection == "users"
        assert exc_info.value.record_id == "nope"

    @pytest.mark.asyncio
    async def test_update_callbacks_run_in_order(self, recording_adapter) -> None:
        events = []
        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("after_save", lambda record: events.append("after_save"))
            .add_callback("after_update", lambda record: events.append("after_update"))
            .add_callback("before_save", lambda record: events.append("before_save"))
            .add_callback("before_update", lambda record: events.append("before_update"))
            .add_callback("before_create", lambda record: events.append("before_create"))
            .seal()
        )
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        await model.update("1", {"name": "Jane"})

        assert events == ["before_update", "before_save", "after_update", "after_save"]

    @pytest.mark.asyncio
    async def test_before_update_returning_false_aborts(self, recording_adapter) -> None:
        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("beforeUpdate", lambda record: False)
            .seal()
        )
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        with pytest.raises(ValidationError) as exc_info:
            await model.update("1", {"name": "Jane"})

        assert isinstance(exc_info.value, CallbackHaltedError)
        assert exc_info.value.event is CallbackEvent.BEFORE_UPDATE
        assert exc_info.value.messages == ["before_update callback halted the operation"]
        assert recording_adapter.calls_to("update") == []
        assert (await recording_adapter.find_by_id("users", "1"))["name"] == "John"

    @pytest.mark.asyncio
    async def test_before_save_raising_aborts_update(self, recording_adapter) -> None:
        def reject(record):
            raise RuntimeError("name is locked")

        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("before_save", reject)
            .seal()
        )
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        with pytest.raises(CallbackHaltedError) as exc_info:
            await model.update("1", {"name": "Jane"})

        assert exc_info.value.event is CallbackEvent.BEFORE_SAVE
        assert exc_info.value.messages == ["Error in before_save callback: name is locked"]
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert recording_adapter.calls_to("update") == []


class TestDestroy:
    @pytest.mark.asyncio
    async def test_destroy_returns_adapter_flag(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        assert await users.destroy("1") is True
        assert recording_adapter.calls_to("destroy") == [("destroy", "users", "1")]
        assert await recording_adapter.find_by_id("users", "1") is None

    @pytest.mark.asyncio
    async def test_destroy_missing_record_never_calls_adapter_destroy(
        self, users, recording_adapter
    ) -> None:
        with pytest.raises(NotFoundError):
            await users.destroy("1")

        assert recording_adapter.calls_to("destroy") == []

    @pytest.mark.asyncio
    async def test_before_destroy_halt_keeps_record(self, recording_adapter) -> None:
        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("before_destroy", lambda record: record.get("name") != "Admin")
            .seal()
        )
        recording_adapter.seed("users", {"id": "1", "name": "Admin"})

        with pytest.raises(CallbackHaltedError):
            await model.destroy("1")

        assert recording_adapter.calls_to("destroy") == []
        assert await recording_adapter.find_by_id("users", "1") is not None

    @pytest.mark.asyncio
    async def test_after_destroy_receives_fetched_record_and_cannot_undo(self, recording_adapter) -> None:
        seen = []

        def audit(record):
            seen.append(dict(record))
            return False

        model = (
            define_dynamo_model(recording_adapter)
            .set_table_name("users")
            .add_callback("after_destroy", audit)
            .seal()
        )
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        with pytest.raises(CallbackHaltedError, match="after_destroy"):
            await model.destroy("1")

        assert seen == [{"id": "1", "name": "John"}]
        assert await recording_adapter.find_by_id("users", "1") is None


class TestReads:
    @pytest.mark.asyncio
    async def test_find_by_id_returns_record(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John", "email": "john@example.com"})

        result = await users.find_by_id("1")

        assert result == {"id": "1", "name": "John", "email": "john@example.com"}
        assert recording_adapter.calls_to("find_by_id") == [("find_by_id", "users", "1")]

    @pytest.mark.asyncio
    async def test_find_by_id_is_idempotent(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John"})

        assert await users.find_by_id("1") == await users.find_by_id("1")

    @pytest.mark.asyncio
    async def test_find_by_id_missing_raises_not_found(self, users) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await users.find_by_id("1")

        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert str(exc_info.value) == "Not found: users/1"

    @pytest.mark.asyncio
    async def test_find_all_passes_params_through(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John"})
        recording_adapter.seed("users", {"id": "2", "name": "Jane"})

        everyone = await users.find_all()
        janes = await users.find_all({"name": "Jane"})

        assert [user["id"] for user in everyone] == ["1", "2"]
        assert janes == [{"id": "2", "name": "Jane"}]
        assert recording_adapter.calls_to("find_all") == [
            ("find_all", "users", None),
            ("find_all", "users", {"name": "Jane"}),
        ]

    @pytest.mark.asyncio
    async def test_where_filters_by_exact_match(self, users, recording_adapter) -> None:
        recording_adapter.seed("users", {"id": "1", "name": "John Doe"})
        recording_adapter.seed("users", {"id": "2", "name": "John"})

        results = await users.where({"name": "John Doe"})

        assert results == [{"id": "1", "name": "John Doe"}]

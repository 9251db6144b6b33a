from __future__ import annotations

import httpx
import pytest

from supabase_rest import ExecuteError, Select, Timeouts, Upsert, ValidationError


def test_execute_error_from_full_body():
    err = ExecuteError.from_response(
        '{"message":"duplicate key","hint":"use upsert","details":"Key (id)=(1)","code":"23505"}'
    )

    assert err == ExecuteError(
        message="duplicate key",
        hint="use upsert",
        details="Key (id)=(1)",
        code="23505",
    )


def test_execute_error_missing_fields_are_none():
    err = ExecuteError.from_response('{"message":"x","code":"42"}')

    assert err.hint is None
    assert err.details is None
    assert err.describe() == "message=x hint=null details=null code=42"


def test_execute_error_explicit_nulls():
    err = ExecuteError.from_response('{"message":null,"hint":null,"details":null,"code":"PGRST116"}')

    assert err.message is None
    assert err.code == "PGRST116"


@pytest.mark.parametrize("body", ["", "not json", "[1, 2]", '"text"'])
def test_execute_error_tolerates_non_object_bodies(body: str):
    err = ExecuteError.from_response(body)

    assert err.hint is None
    assert err.code is None
    assert err.message == (body or None)


def test_execute_error_renders_non_string_fields():
    err = ExecuteError.from_response('{"message":"bad","code":400,"details":{"column":"id"}}')

    assert err.code == "400"
    assert err.details == '{"column": "id"}'


def test_timeouts_defaults_and_conversion():
    timeout = Timeouts().to_httpx()

    assert isinstance(timeout, httpx.Timeout)
    assert timeout.connect == 40.0
    assert timeout.read == 30.0
    assert timeout.write == 30.0
    assert timeout.pool == 40.0


def test_operation_names():
    assert Select().name == "SELECT"
    assert Upsert("{}", ["id"]).name == "UPSERT"


def test_upsert_duplicate_message_lists_columns():
    with pytest.raises(ValidationError, match="duplicate"):
        Upsert('{"id":1}', ["id", "id"])


def test_validation_error_is_a_value_error():
    with pytest.raises(ValueError):
        Upsert("", ["id"])

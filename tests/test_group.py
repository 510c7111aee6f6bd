import math

import pytest

from abcsdk.env import ParamKeyNotFoundError
from abcsdk.group import ExperimentList, ExperimentResult, Group

PARAMS = {
    "float64": "10.98",
    "int64": "991119",
    "string": "stringValue",
    "bool": "1",
    "jsonMap": '{"key1": "value1"}',
}


@pytest.fixture
def group():
    return Group(params=PARAMS)


def test_params_copy(group):
    assert group.params() == PARAMS
    copy = group.params()
    copy["new"] = "x"
    assert "new" not in group.params()


def test_scene_id_list():
    assert Group(params=PARAMS).scene_id_list() is None
    g = Group(scene_ids=[1, 2, 3])
    assert g.scene_id_list() == [1, 2, 3]
    g.scene_id_list().append(4)
    assert g.scene_id_list() == [1, 2, 3]


def test_float_api(group):
    assert group.get_float_with_default("float64", 10) == 10.98
    assert group.get_float_with_default("string", 10) == 10.0
    assert group.must_get_float("float64") == 10.98
    assert group.get_float("float64") == 10.98
    with pytest.raises(ValueError):
        group.get_float("string")
    with pytest.raises(ParamKeyNotFoundError):
        group.get_float("empty")
    assert group.must_get_float("empty") == 0.0


def test_int_api(group):
    assert group.get_int_with_default("int64", 95) == 991119
    assert group.get_int_with_default("string", 95) == 95
    assert group.must_get_int("int64") == 991119
    assert group.get_int("int64") == 991119
    with pytest.raises(ParamKeyNotFoundError):
        group.get_int("empty")
    assert group.must_get_int("empty") == 0


def test_string_api(group):
    assert group.get_string_with_default("string", "defaultString") == "stringValue"
    assert group.must_get_string("empty") == ""
    assert group.get_string_with_default("empty", "xx") == "xx"


def test_bool_api(group):
    assert group.get_bool_with_default("bool", False) is True
    assert group.get_bool_with_default("int64", False) is False
    with pytest.raises(ParamKeyNotFoundError):
        group.get_bool("empty")
    assert group.must_get_bool("empty") is False
    assert group.must_get_bool("bool") is True


def test_json_map_api(group):
    assert group.get_json_map_with_default("jsonMap", None) == {"key1": "value1"}
    assert group.must_get_json_map("empty") is None
    assert group.must_get_json_map("string") is None
    assert group.get_json_map_with_default("string", None) is None


@pytest.mark.parametrize(
    "text,expected",
    [("t", True), ("TRUE", True), ("True", True), ("0", False), ("F", False), ("false", False)],
)
def test_bool_spellings(text, expected):
    assert Group(params={"k": text}).get_bool("k") is expected


@pytest.mark.parametrize("text", ["yes", "tRuE", " true", ""])
def test_bool_rejects(text):
    with pytest.raises(ValueError):
        Group(params={"k": text}).get_bool("k")


@pytest.mark.parametrize("text", ["1_000", " 12", "0x10", "1.5", ""])
def test_int_rejects(text):
    with pytest.raises(ValueError):
        Group(params={"k": text}).get_int("k")


def test_int_overflow_clamps_in_must_get():
    g = Group(params={"big": "9223372036854775808", "small": "-9223372036854775809"})
    with pytest.raises(ValueError):
        g.get_int("big")
    assert g.must_get_int("big") == 2**63 - 1
    assert g.must_get_int("small") == -(2**63)
    assert g.get_int_with_default("big", 7) == 7


def test_float_special_values():
    g = Group(params={"inf": "-Inf", "huge": "1e400", "under": "1_0.5"})
    assert g.get_float("inf") == -math.inf
    with pytest.raises(ValueError):
        g.get_float("huge")
    assert g.must_get_float("huge") == math.inf
    with pytest.raises(ValueError):
        g.get_float("under")


def test_json_map_non_object_and_null():
    g = Group(params={"list": "[1, 2]", "null": "null", "nan": '{"a": NaN}'})
    with pytest.raises(ValueError):
        g.get_json_map("list")
    assert g.get_json_map("null") is None
    with pytest.raises(ValueError):
        g.get_json_map("nan")


def test_bytes_api():
    g = Group(params={"k": "héllo"})
    assert g.get_bytes("k") == "héllo".encode("utf-8")
    assert g.get_bytes("missing") is None
    assert g.must_get_bytes("missing") == b""
    assert g.must_get_bytes("k") == "héllo".encode("utf-8")


def test_group_equality():
    a = Group(id=1, key="1", layer_key="layer", params={"x": "1"})
    b = Group(id=1, key="1", layer_key="layer", params={"x": "1"})
    c = Group(id=2, key="1", layer_key="layer", params={"x": "1"})
    assert a == b
    assert not a == c


def test_experiment_result_delegates_to_group():
    g = Group(id=100002001, key="100002001", layer_key="overrideLayer", params={"key1": "v"})
    result = ExperimentResult(group=g)
    assert result.id == 100002001
    assert result.layer_key == "overrideLayer"
    assert result.get_string("key1") == "v"
    with pytest.raises(AttributeError):
        ExperimentResult().layer_key


def test_experiment_list_default():
    lst = ExperimentList()
    assert lst.data == {}
    assert lst.user_context is None
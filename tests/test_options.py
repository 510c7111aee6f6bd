from abcsdk.group import Group
from abcsdk.options import (
    Assignment,
    ExperimentOptions,
    apply_options,
    convert_group,
    default_experiment_options,
    fill_options,
    with_automatic,
    with_experiment_key,
    with_experiment_keys,
    with_is_disable_dmp,
    with_is_prepared_dmp_tag,
    with_layer_key,
    with_layer_key_list,
    with_scene_id,
    with_scene_id_list,
)
from abcsdk.user import new_user_context, with_decision_id, with_tag_kv


def test_default_options_values():
    options = default_experiment_options()
    assert options.is_exposure_logging_automatic is True
    assert options.is_prepared_dmp_tag is False
    assert options.is_disable_dmp is False
    assert options.layer_keys is None
    assert options.scene_ids is None


def test_default_options_are_independent_copies():
    first = default_experiment_options()
    with_layer_key("overrideLayer")(first)
    second = default_experiment_options()
    assert second.layer_keys is None
    assert first.layer_keys == {"overrideLayer"}


def test_scene_filters_accumulate():
    options = apply_options(
        default_experiment_options(),
        [with_scene_id_list([1, 2, 3]), with_scene_id(4)],
    )
    assert options.scene_ids == {1, 2, 3, 4}


def test_layer_filters_accumulate_and_deduplicate():
    options = apply_options(
        default_experiment_options(),
        [
            with_layer_key("overrideLayer"),
            with_layer_key_list(["overrideLayer", "doubleHashLayer1"]),
        ],
    )
    assert options.layer_keys == {"overrideLayer", "doubleHashLayer1"}


def test_experiment_key_filters():
    options = apply_options(
        default_experiment_options(),
        [with_experiment_key("100001"), with_experiment_keys(["100002", "100001"])],
    )
    assert options.experiment_keys == {"100001", "100002"}


def test_switch_options_last_one_wins():
    options = apply_options(
        default_experiment_options(),
        [
            with_automatic(False),
            with_is_prepared_dmp_tag(True),
            with_is_disable_dmp(True),
            with_automatic(True),
        ],
    )
    assert options.is_exposure_logging_automatic is True
    assert options.is_prepared_dmp_tag is True
    assert options.is_disable_dmp is True


def test_apply_options_returns_same_object():
    options = ExperimentOptions()
    assert apply_options(options, []) is options


def test_fill_options_copies_user_identifiers():
    ctx = new_user_context("unitID", with_decision_id("decisionID"), with_tag_kv("age", "27"))
    options = default_experiment_options()
    options.dmp_tag_result["stale"] = True
    filled = fill_options(ctx, options, True)
    assert filled is options
    assert options.unit_id == "unitID"
    assert options.decision_id == "decisionID"
    assert options.new_unit_id == "unitID"
    assert options.new_decision_id == "decisionID"
    assert options.attribute_tag == {"age": ["27"]}
    assert options.dmp_tag_result == {}
    assert options.holdout_layer_result == {}
    assert options.is_disable_dmp is True


def test_convert_group_none():
    assert convert_group(None) is None


def test_convert_group_fields():
    assignment = Assignment(
        id=100002001,
        group_key="100002001",
        experiment_key="100002",
        layer_key="overrideLayer",
        is_control=True,
        params={"key1": "100002001"},
    )
    group = convert_group(assignment)
    expected = Group(
        id=100002001,
        key="100002001",
        experiment_key="100002",
        layer_key="overrideLayer",
        is_control=True,
        params={"key1": "100002001"},
    )
    assert group == expected
    assert group.get_string("key1") == "100002001"
    assert group.scene_id_list() is None
    assert not group.holdout_data


def test_convert_group_scene_ids():
    group = convert_group(Assignment(id=301001001, scene_id_list=[1, 2, 3]))
    assert group.scene_id_list() == [1, 2, 3]


def test_convert_group_holdout_is_flattened_one_level():
    inner = Assignment(id=200002002, layer_key="inner")
    holdout = Assignment(
        id=200002001,
        layer_key="subDomain-holdoutDomain1-singleLayer",
        holdout_data={"deeper": inner},
    )
    top = Assignment(id=100002001, layer_key="overrideLayer", holdout_data={"h": holdout})
    group = convert_group(top)
    assert set(group.holdout_data) == {"h"}
    converted = group.holdout_data["h"]
    assert converted.id == 200002001
    assert converted.layer_key == "subDomain-holdoutDomain1-singleLayer"
    assert not converted.holdout_data
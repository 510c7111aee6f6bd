# abcsdk

Building blocks for A/B experimentation clients. The package covers user
contexts, typed access to experiment group parameters, assignment options,
conversion of assignments into groups, and exposure records. It has no
dependencies outside the standard library.

## Installation

```
pip install abcsdk
```

To run the tests:

```
pip install "abcsdk[test]"
pytest
```

## User contexts (`abcsdk.user`)

`new_user_context(unit_id, *attributions)` builds a `UserContext` and applies
each attribution in order:

```python
from abcsdk.user import new_user_context, with_tags, with_tag_kv, with_expanded_data

ctx = new_user_context(
    "unit-42",
    with_tags({"country": ["cn"]}),
    with_tag_kv("age", "27"),
    with_expanded_data({"channel": "web"}),
)
```

- `with_tags(tags)` copies the tags in and replaces keys that already exist.
- `with_tag_kv(key, value)` appends one value to a tag.
- `with_expanded_data(data)` merges extra key/value data that goes with exposures.
- `with_decision_id`, `with_new_unit_id` and `with_new_decision_id` set the
  other identifiers.

Once the attributions have run, the identifiers are filled in as follows.
`decision_id` defaults to `unit_id`. `new_unit_id` defaults to `unit_id`.
`new_decision_id` defaults to `decision_id` when no new unit id was given,
and to `new_unit_id` when one was.

Errors are not raised while the context is built. They are stored on
`ctx.error` instead: a `ValueError` for an empty unit id, and one for an empty
value passed to any of the three id attributions.

## Experiment groups (`abcsdk.group`)

A `Group` holds an experiment group and its string parameters.
`params()` and `scene_id_list()` return copies. The typed accessors are:

- `get_bool`, `get_int`, `get_float`, `get_json_map`, `get_string`: these raise
  `abcsdk.env.ParamKeyNotFoundError` (a `LookupError`) when the key is
  missing, and `ValueError` when the value is malformed. `get_int` accepts
  only signed 64-bit integers. `get_json_map` returns `None` for `null`.
- `get_*_with_default(key, default)`: these return `default` on any error.
- `must_get_*`: these return a zero value on error. On overflow,
  `must_get_int` returns the clamped 64-bit bound and `must_get_float`
  returns infinity.
- `get_bytes` returns `None` when the key is missing. `must_get_bytes`
  returns `b""`.

```python
group.get_int("color")
group.get_bool_with_default("switch", True)
group.must_get_string("title")
```

`ExperimentList` maps layer keys to groups and carries the user context.
`ExperimentResult` wraps one group. Attribute access falls through to that
group.

## Assignment options (`abcsdk.options`)

`ExperimentOptions` holds the filters and switches for one assignment call.
Start from `default_experiment_options()`, then combine
`apply_options(options, opts)` with these options:

- `with_layer_key`
- `with_layer_key_list`
- `with_scene_id`
- `with_scene_id_list`
- `with_experiment_key`
- `with_experiment_keys`
- `with_automatic`
- `with_is_prepared_dmp_tag`
- `with_is_disable_dmp`

`fill_options(user_context, options, disable_dmp)` copies the user's
identifiers and tags into the options.

`convert_group(assignment)` turns an `Assignment` into a `Group`. Its holdout
assignments become the group's `holdout_data`.

## Exposure records (`abcsdk.exposure`)

`convert_experiment(...)` builds one `Exposure` with an `ExposureType`
(`AUTOMATIC`, `MANUAL` or `UNKNOWN`).

`convert_experiment_list(project_id, experiment_list, exposure_type,
ignore_report_group_ids)` returns a pair:

1. a dict of exposures for each scene id;
2. the list of exposures whose groups belong to no scene.

Groups that are flagged in `ignore_report_group_ids` are skipped.

Helpers:

- `marshal_expanded_data` renders extra data as sorted `k1=v1;k2=v2`. It
  includes the alternative unit id under `new_id`.
- `extra_data_from_user_context` returns the same data as a dict.
- `experiment_id_list` joins group ids with `;`.
- `int64_list_join` joins integers with a separator.

## Environment helpers (`abcsdk.env`, `abcsdk.netinfo`)

`register_addr` / `get_addr` and `register_dmp_addr` / `get_dmp_addr` keep a
backend address for each environment. Registering a malformed URL raises
`ValueError`. Unknown environments fall back to the `prd` address.

For monitoring events the module offers:

- `event_status(err)`, which returns a `MonitorEventStatus`;
- `err_msg(err)`;
- `sampling_interval(config, err)`;
- `json_string(source)`: compact, HTML-escaped JSON, or `""` for `None` or
  for values that cannot be serialised;
- `invoke_path(skip)`.

`abcsdk.netinfo.local_ip()` returns this host's first reportable address,
with `127.0.0.1` as the fallback. `local_ip_list(limit)` and `is_inner_ip`
expose the rules it uses.

## What this package does not do

The package makes no network calls and keeps no configuration cache. It has
no splitting engine that assigns units to groups: assignments arrive as
`Assignment` objects built by the caller. It also does not send or queue
exposure or monitoring records; it only builds them. There is no
initialisation entry point and no command-line tool.
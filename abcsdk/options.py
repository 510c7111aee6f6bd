"""Options that control experiment assignment and conversion of its results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from abcsdk.group import Group
from abcsdk.user import UserContext


@dataclass
class Assignment:
    """A group assigned to a unit by the splitting engine, before conversion."""

    id: int = 0
    group_key: str = ""
    experiment_key: str = ""
    layer_key: str = ""
    is_default: bool = False
    is_control: bool = False
    is_override_list: bool = False
    params: dict[str, str] = field(default_factory=dict)
    unit_id_type: int = 0
    scene_id_list: list[int] = field(default_factory=list)
    holdout_data: dict[str, Assignment] = field(default_factory=dict)


@dataclass
class ExperimentOptions:
    """Filters and switches for one experiment assignment call.

    Filters are combined with AND: only groups that match every given
    scene ID, layer key and experiment key set are returned.
    """

    is_exposure_logging_automatic: bool = True
    is_prepared_dmp_tag: bool = False
    is_disable_dmp: bool = False
    scene_ids: set[int] | None = None
    experiment_keys: set[str] | None = None
    layer_keys: set[str] | None = None
    attribute_tag: dict[str, list[str]] | None = None
    unit_id: str = ""
    decision_id: str = ""
    new_unit_id: str = ""
    new_decision_id: str = ""
    dmp_tag_result: dict[str, bool] = field(default_factory=dict)
    holdout_layer_result: dict[str, Assignment] = field(default_factory=dict)


ExperimentOption = Callable[[ExperimentOptions], None]


def default_experiment_options() -> ExperimentOptions:
    """Return a fresh copy of the default options."""
    return ExperimentOptions(
        is_exposure_logging_automatic=True,
        is_prepared_dmp_tag=False,
        is_disable_dmp=False,
    )


def apply_options(
    options: ExperimentOptions, opts: Iterable[ExperimentOption]
) -> ExperimentOptions:
    """Apply each option in order and return the options."""
    for opt in opts:
        opt(options)
    return options


def fill_options(
    user_context: UserContext, options: ExperimentOptions, disable_dmp: bool
) -> ExperimentOptions:
    """Copy the user's identifiers and tags into the options."""
    options.attribute_tag = user_context.tags
    options.unit_id = user_context.unit_id
    options.decision_id = user_context.decision_id
    options.new_unit_id = user_context.new_unit_id
    options.new_decision_id = user_context.new_decision_id
    options.dmp_tag_result = {}
    options.holdout_layer_result = {}
    options.is_disable_dmp = disable_dmp
    return options


def _convert_without_holdout(assignment: Assignment) -> Group:
    return Group(
        id=assignment.id,
        key=assignment.group_key,
        experiment_key=assignment.experiment_key,
        layer_key=assignment.layer_key,
        is_default=assignment.is_default,
        is_control=assignment.is_control,
        is_override_list=assignment.is_override_list,
        params=assignment.params,
        scene_ids=assignment.scene_id_list,
        unit_id_type=assignment.unit_id_type,
    )


def convert_group(assignment: Assignment | None) -> Group | None:
    """Convert an assignment, and its holdout assignments, into a group."""
    if assignment is None:
        return None
    result = _convert_without_holdout(assignment)
    if assignment.holdout_data:
        result.holdout_data = {
            key: _convert_without_holdout(holdout)
            for key, holdout in assignment.holdout_data.items()
            if holdout is not None
        }
    return result


def with_scene_id_list(scene_id_list: Iterable[int]) -> ExperimentOption:
    """Only consider layers in the given scenes."""

    def apply(options: ExperimentOptions) -> None:
        if options.scene_ids is None:
            options.scene_ids = set()
        options.scene_ids.update(scene_id_list)

    return apply


def with_experiment_key(experiment_key: str) -> ExperimentOption:
    """Filter by experiment key; prefer ``with_layer_key``."""

    def apply(options: ExperimentOptions) -> None:
        if options.experiment_keys is None:
            options.experiment_keys = set()
        options.experiment_keys.add(experiment_key)

    return apply


def with_experiment_keys(experiment_keys: Iterable[str]) -> ExperimentOption:
    """Filter by several experiment keys; prefer ``with_layer_key_list``."""

    def apply(options: ExperimentOptions) -> None:
        if options.experiment_keys is None:
            options.experiment_keys = set()
        options.experiment_keys.update(experiment_keys)

    return apply


def with_layer_key_list(layer_key_list: Iterable[str]) -> ExperimentOption:
    """Only consider the given layers."""

    def apply(options: ExperimentOptions) -> None:
        if options.layer_keys is None:
            options.layer_keys = set()
        options.layer_keys.update(layer_key_list)

    return apply


def with_scene_id(scene_id: int) -> ExperimentOption:
    """Only consider layers in one scene."""

    def apply(options: ExperimentOptions) -> None:
        if options.scene_ids is None:
            options.scene_ids = set()
        options.scene_ids.add(scene_id)

    return apply


def with_layer_key(layer_key: str) -> ExperimentOption:
    """Only consider one layer."""

    def apply(options: ExperimentOptions) -> None:
        if options.layer_keys is None:
            options.layer_keys = set()
        options.layer_keys.add(layer_key)

    return apply


def with_automatic(is_automatic: bool) -> ExperimentOption:
    """Set whether exposures are logged automatically."""

    def apply(options: ExperimentOptions) -> None:
        options.is_exposure_logging_automatic = is_automatic

    return apply


def with_is_prepared_dmp_tag(is_prepared_dmp_tag: bool) -> ExperimentOption:
    """Set whether DMP tags are fetched up front."""

    def apply(options: ExperimentOptions) -> None:
        options.is_prepared_dmp_tag = is_prepared_dmp_tag

    return apply


def with_is_disable_dmp(is_disable_dmp: bool) -> ExperimentOption:
    """Set whether DMP lookups are disabled."""

    def apply(options: ExperimentOptions) -> None:
        options.is_disable_dmp = is_disable_dmp

    return apply
"""Conversion of experiment assignments into exposure records."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Iterable, Mapping

from abcsdk.env import SDK_TYPE, VERSION
from abcsdk.group import ExperimentList, Group
from abcsdk.user import UserContext

# When a unit has an alternative ID, it is logged under this key in the
# exposure's extra data.
NEW_ID_KEY = "new_id"


class ExposureType(enum.Enum):
    """How an exposure was logged."""

    UNKNOWN = "EXPOSURE_TYPE_UNKNOWN"
    AUTOMATIC = "EXPOSURE_TYPE_AUTOMATIC"
    MANUAL = "EXPOSURE_TYPE_MANUAL"

    def __str__(self) -> str:
        return self.value


@dataclass
class Exposure:
    """One exposure record of a unit to an experiment group."""

    unit_id: str
    group_id: int
    project_id: str
    time: int
    layer_key: str
    exp_key: str
    unit_type: str
    cluster_id: str
    sdk_type: str
    sdk_version: str
    exposure_type: ExposureType
    extra_data: dict[str, str] | None = None


def int64_list_join(elems: Iterable[int], sep: str) -> str:
    """Join integers with a separator."""
    return sep.join(str(elem) for elem in elems)


def _merged_extra(user_context: UserContext) -> dict[str, str] | None:
    if not user_context.expanded_data and not user_context.new_unit_id:
        return None
    merged: dict[str, str] = {}
    if user_context.new_unit_id:
        merged[NEW_ID_KEY] = user_context.new_unit_id
    if user_context.expanded_data:
        merged.update(user_context.expanded_data)
    return merged


def marshal_expanded_data(user_context: UserContext) -> str:
    """Render extra data as ``k1=v1;k2=v2`` with keys sorted."""
    merged = _merged_extra(user_context)
    if merged is None:
        return ""
    return ";".join(f"{key}={merged[key]}" for key in sorted(merged))


def extra_data_from_user_context(user_context: UserContext) -> dict[str, str] | None:
    """Return extra exposure data, or None when there is none."""
    return _merged_extra(user_context)


def experiment_id_list(experiment_list: ExperimentList | None) -> str:
    """Return the IDs of the groups in a list, separated by ``;``."""
    if experiment_list is None:
        return ""
    return int64_list_join((group.id for group in experiment_list.data.values()), ";")


def convert_experiment(
    project_id: str,
    group: Group,
    user_context: UserContext,
    exposure_type: ExposureType,
    upload_time: int,
) -> Exposure:
    """Build the exposure record of one group for a user."""
    return Exposure(
        unit_id=user_context.unit_id,
        group_id=group.id,
        project_id=project_id,
        time=upload_time,
        layer_key=group.layer_key,
        exp_key=group.experiment_key,
        unit_type=str(int(group.unit_id_type)),
        cluster_id=user_context.decision_id,
        sdk_type=SDK_TYPE,
        sdk_version=VERSION,
        exposure_type=exposure_type,
        extra_data=extra_data_from_user_context(user_context),
    )


def convert_experiment_list(
    project_id: str,
    experiment_list: ExperimentList,
    exposure_type: ExposureType,
    ignore_report_group_ids: Mapping[int, bool] | None,
) -> tuple[dict[int, list[Exposure]], list[Exposure]]:
    """Split exposures by scene.

    Returns the exposures for each scene ID and the exposures of groups
    that belong to no scene. Groups flagged in ``ignore_report_group_ids``
    are left out.
    """
    user_context = experiment_list.user_context
    if user_context is None:
        raise ValueError("user context is required")
    ignored = ignore_report_group_ids or {}
    upload_time = int(time.time())
    by_scene: dict[int, list[Exposure]] = {}
    without_scene: list[Exposure] = []
    for group in experiment_list.data.values():
        if ignored.get(group.id):
            continue
        scene_ids = group.scene_id_list()
        if not scene_ids:
            without_scene.append(
                convert_experiment(project_id, group, user_context, exposure_type, upload_time)
            )
            continue
        for scene_id in scene_ids:
            by_scene.setdefault(scene_id, []).append(
                convert_experiment(project_id, group, user_context, exposure_type, upload_time)
            )
    return by_scene, without_scene
"""User context carrying the identifiers and attributes used for assignment."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

Attribution = Callable[["UserContext"], None]


@dataclass
class UserContext:
    """Identifiers, tags and extra exposure data for one experiment unit.

    An error raised while building the context is kept in ``error`` so that
    later calls can report it.
    """

    unit_id: str = ""
    decision_id: str = ""
    new_unit_id: str = ""
    new_decision_id: str = ""
    tags: dict[str, list[str]] | None = None
    expanded_data: dict[str, str] | None = None
    error: Exception | None = field(default=None, compare=False)


def _settle_ids(ctx: UserContext) -> UserContext:
    if not ctx.unit_id:
        ctx.error = ValueError("unitID is required")
        return ctx
    if not ctx.decision_id:
        ctx.decision_id = ctx.unit_id
    empty_new_unit_id = not ctx.new_unit_id
    if empty_new_unit_id:
        ctx.new_unit_id = ctx.unit_id
    if not ctx.new_decision_id:
        ctx.new_decision_id = ctx.decision_id if empty_new_unit_id else ctx.new_unit_id
    return ctx


def new_user_context(unit_id: str, *args: Attribution) -> UserContext:
    """Build a user context, applying each attribution in order."""
    ctx = UserContext(unit_id=unit_id, tags={})
    for attribution in args:
        attribution(ctx)
    return _settle_ids(ctx)


def with_tags(tags: dict[str, list[str]] | None) -> Attribution:
    """Set tags, overriding keys that already exist."""

    def apply(ctx: UserContext) -> None:
        if not tags:
            return
        copied = {key: list(values) for key, values in tags.items()}
        if not ctx.tags:
            ctx.tags = copied
            return
        ctx.tags.update(copied)

    return apply


def with_tag_kv(key: str, value: str) -> Attribution:
    """Append one value to a tag."""

    def apply(ctx: UserContext) -> None:
        if ctx.tags is None:
            ctx.tags = {}
        ctx.tags.setdefault(key, []).append(value)

    return apply


def with_decision_id(decision_id: str) -> Attribution:
    """Use a separate ID for traffic splitting."""

    def apply(ctx: UserContext) -> None:
        if not decision_id:
            ctx.error = ValueError("decisionID is required")
            return
        ctx.decision_id = decision_id

    return apply


def with_new_unit_id(new_unit_id: str) -> Attribution:
    """Set the alternative unit ID used by layers migrating identifiers."""

    def apply(ctx: UserContext) -> None:
        if not new_unit_id:
            ctx.error = ValueError("newUnitID is required")
            return
        ctx.new_unit_id = new_unit_id

    return apply


def with_new_decision_id(new_decision_id: str) -> Attribution:
    """Set the splitting ID paired with the alternative unit ID."""

    def apply(ctx: UserContext) -> None:
        if not new_decision_id:
            ctx.error = ValueError("newDecisionID is required")
            return
        ctx.new_decision_id = new_decision_id

    return apply


def with_expanded_data(expanded_data: dict[str, str] | None) -> Attribution:
    """Add extra key/value data logged with exposures."""

    def apply(ctx: UserContext) -> None:
        if not ctx.expanded_data:
            ctx.expanded_data = dict(expanded_data) if expanded_data else None
            return
        if expanded_data:
            ctx.expanded_data.update(expanded_data)

    return apply
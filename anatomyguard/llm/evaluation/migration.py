"""Adapters from earlier report shapes to the current one.

Earlier revisions of the instruction produced ``elaboratedGeneralisedFeedback``
in place of ``generalisedFeedback`` and did not always emit
``finalizedFeedback`` or ``actionSummary``. Each known shape has a migration
that rewrites it into the current shape before schema validation; anything
else is left for the validator to reject.
"""

from __future__ import annotations

import logging
import typing as t

logger = logging.getLogger(__name__)

Payload = dict[str, t.Any]


class Migration(t.NamedTuple):
    name: str
    applies: t.Callable[[Payload], bool]
    apply: t.Callable[[Payload], Payload]


def _is_elaborated_shape(payload: Payload) -> bool:
    return "elaboratedGeneralisedFeedback" in payload and "generalisedFeedback" not in payload


def _rename_elaborated_feedback(payload: Payload) -> Payload:
    migrated = {k: v for k, v in payload.items() if k != "elaboratedGeneralisedFeedback"}
    migrated["generalisedFeedback"] = payload["elaboratedGeneralisedFeedback"]
    # the elaborated shape predates both sequences; they are absent, not empty
    migrated.setdefault("finalizedFeedback", [])
    migrated.setdefault("actionSummary", [])
    return migrated


MIGRATIONS: tuple[Migration, ...] = (
    Migration("elaborated-generalised-feedback", _is_elaborated_shape, _rename_elaborated_feedback),
)


def migrate_payload(payload: t.Any, migrations: t.Sequence[Migration] = MIGRATIONS) -> t.Any:
    """Apply every applicable migration, in order, to a parsed payload.

    Non-object payloads are returned unchanged.
    """
    if not isinstance(payload, dict):
        return payload

    migrated = t.cast(Payload, payload)
    for migration in migrations:
        if migration.applies(migrated):
            migrated = migration.apply(migrated)
            logger.info("migrated generated report", extra={"migration": migration.name})
    return migrated

"""
Response validation: whole-body contract checks plus per-item filtering.

Two failure levels, handled differently:

- **Body level** (fatal for the batch): the text is not JSON, the top level is
  not an object, or a required array field is missing / not an array. This
  means the external contract was violated wholesale, so
  :class:`MalformedResponseError` is raised.
- **Item level** (recovered locally): an element is missing a field, has a
  wrong primitive type, an out-of-set enumerated value, or a ``rank`` the
  batch never addressed. The element is dropped and recorded as an
  :class:`ItemValidationError`; the rest of the batch still applies.

A body whose arrays end up empty after filtering is a legitimate
"nothing to apply" outcome, not an error.

Example::

    parsed = ResponseValidator().parse(raw, AUDIT_SHAPE, addressed_ranks={11, 12, 13})
    for concern in parsed["concerns"]:
        ...
    parsed.dropped   # [ItemValidationError(...), ...]
"""

from __future__ import annotations

import json
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from kovocab.core.errors import ItemValidationError, MalformedResponseError
from kovocab.core.logging import get_logger
from kovocab.pipelines.schemas import ResponseItem, ResponseShape

logger = get_logger(__name__)


@dataclass
class ParsedResponse:
    """Validated items per array field, plus what was dropped."""

    items: dict[str, list[ResponseItem]] = field(default_factory=dict)
    dropped: list[ItemValidationError] = field(default_factory=list)

    def __getitem__(self, field_name: str) -> list[Any]:
        return self.items.get(field_name, [])

    @property
    def total(self) -> int:
        return sum(len(v) for v in self.items.values())

    @property
    def is_empty(self) -> bool:
        return self.total == 0


class ResponseValidator:
    """Parses a response body against a :class:`ResponseShape`."""

    def parse(
        self,
        raw_text: str,
        shape: ResponseShape,
        addressed_ranks: Collection[int] | None = None,
    ) -> ParsedResponse:
        """Validate ``raw_text``.

        Args:
            raw_text: Response body.
            shape: Expected top-level object.
            addressed_ranks: Ranks the batch sent; items outside are dropped.
                ``None`` disables the check.

        Raises:
            MalformedResponseError: body is not JSON, not an object, or lacks
                a required array field.
        """
        try:
            body = json.loads(raw_text)
        except (json.JSONDecodeError, TypeError) as e:
            raise MalformedResponseError(
                f"{shape.name}: response is not valid JSON: {e}", raw=raw_text, cause=e
            ) from e

        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"{shape.name}: expected a JSON object, got {type(body).__name__}", raw=raw_text
            )

        parsed = ParsedResponse()
        for field_name, model in shape.fields.items():
            if field_name not in body:
                raise MalformedResponseError(
                    f'{shape.name}: missing required field "{field_name}"', raw=raw_text
                )
            candidates = body[field_name]
            if not isinstance(candidates, list):
                raise MalformedResponseError(
                    f'{shape.name}: field "{field_name}" must be an array', raw=raw_text
                )
            parsed.items[field_name] = self._filter_items(
                field_name, candidates, model, addressed_ranks, parsed.dropped
            )
        return parsed

    def _filter_items(
        self,
        field_name: str,
        candidates: list[Any],
        model: type[ResponseItem],
        addressed_ranks: Collection[int] | None,
        dropped: list[ItemValidationError],
    ) -> list[ResponseItem]:
        accepted: list[ResponseItem] = []
        for index, candidate in enumerate(candidates):
            try:
                item = model.model_validate(candidate)
            except PydanticValidationError as e:
                reason = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc']) or '<item>'}: {err['msg']}"
                    for err in e.errors()
                )
                self._drop(dropped, field_name, index, candidate, reason)
                continue

            if addressed_ranks is not None and item.rank not in addressed_ranks:
                self._drop(dropped, field_name, index, candidate, f"rank {item.rank} not in batch")
                continue

            accepted.append(item)
        return accepted

    @staticmethod
    def _drop(
        dropped: list[ItemValidationError],
        field_name: str,
        index: int,
        candidate: Any,
        reason: str,
    ) -> None:
        dropped.append(
            ItemValidationError(reason, field_name=field_name, index=index, item=candidate)
        )
        logger.warning("validator.item_dropped", field=field_name, index=index, reason=reason)

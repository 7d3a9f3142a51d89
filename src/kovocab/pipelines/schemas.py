"""Response contracts for the LLM-backed operations.

Each operation expects one JSON object with named array field(s); every array
element is a fixed-field record validated strictly (no type coercion, no
extra keys).  The same pydantic models produce the JSON Schema sent to the
provider as the structured-output format.

    definitions   {"definitions":  [{"rank": int, "def": str}]}
    patrol        {"concerns":     [{"rank": int, "key": "def", "why": str}],
                   "pos_fixes":    [{"rank": int, "newPos": POS}]}
    corrections   {"corrections":  [{"rank": int, "action": "replace"|"keep"|"null",
                                     "def": str | null}]}
    translations  {"translations": [{"rank": int, "eng": str}]}
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator

from kovocab.llm.protocol import ResponseFormat

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

PosTag = Literal["ADJ", "ADV", "CONJ", "NOUN", "VERB", "AFFIX", "DET", "NUM", "PRON", "PRT", "PUNCT", "X"]

CorrectionAction = Literal["replace", "keep", "null"]


class ResponseItem(BaseModel):
    """Base for array elements: strict types, no unknown keys, keyed by rank."""

    model_config = ConfigDict(strict=True, extra="forbid", populate_by_name=True, frozen=True)

    rank: int


class DefinitionItem(ResponseItem):
    definition: NonEmptyStr = Field(alias="def")


class ConcernItem(ResponseItem):
    key: Literal["def"]
    why: str


class PosFixItem(ResponseItem):
    new_pos: PosTag = Field(alias="newPos")


class CorrectionItem(ResponseItem):
    action: CorrectionAction
    definition: str | None = Field(alias="def")

    @model_validator(mode="after")
    def _replace_needs_definition(self) -> CorrectionItem:
        if self.action == "replace" and not (self.definition and self.definition.strip()):
            raise ValueError('action "replace" requires a non-empty "def"')
        return self


class TranslationItem(ResponseItem):
    eng: NonEmptyStr


@dataclass(frozen=True)
class ResponseShape:
    """Expected top-level object: array field name -> element model."""

    name: str
    fields: dict[str, type[ResponseItem]]

    def json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "additionalProperties": False,
            "required": list(self.fields),
            "properties": {
                field_name: {
                    "type": "array",
                    "items": _strict_item_schema(model),
                }
                for field_name, model in self.fields.items()
            },
        }

    def response_format(self) -> ResponseFormat:
        return ResponseFormat(name=self.name, schema=self.json_schema())


# Keywords strict structured-output mode rejects; the item models still enforce them.
UNSUPPORTED_KEYWORDS = frozenset({"title", "default", "minLength", "maxLength"})


def _strict_item_schema(model: type[ResponseItem]) -> dict[str, Any]:
    schema = _strip_unsupported(model.model_json_schema(by_alias=True))
    schema["additionalProperties"] = False
    schema["required"] = list(schema.get("properties", {}))
    return schema


def _strip_unsupported(node: Any) -> Any:
    if isinstance(node, list):
        return [_strip_unsupported(item) for item in node]
    if not isinstance(node, dict):
        return node
    cleaned = {}
    for key, value in node.items():
        if key == "properties":
            cleaned[key] = {name: _strip_unsupported(prop) for name, prop in value.items()}
        elif key == "const":
            cleaned["enum"] = [value]
        elif key not in UNSUPPORTED_KEYWORDS:
            cleaned[key] = _strip_unsupported(value)
    return cleaned


DEFINITIONS_SHAPE = ResponseShape("definitions", {"definitions": DefinitionItem})
AUDIT_SHAPE = ResponseShape("patrol_concerns", {"concerns": ConcernItem, "pos_fixes": PosFixItem})
CORRECTIONS_SHAPE = ResponseShape("apply_corrections", {"corrections": CorrectionItem})
TRANSLATIONS_SHAPE = ResponseShape("eng_translations", {"translations": TranslationItem})

"""Pydantic models for API request bodies."""

from pydantic import BaseModel, Field, field_validator

from macros_tracker.config import parse_block_ids


class CalcRequest(BaseModel):
    """Block ids to aggregate, as a list or a comma separated string."""

    ids: list[str]

    @field_validator("ids", mode="before")
    @classmethod
    def _split_ids(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_block_ids(value)
        return value


class AddLinesRequest(BaseModel):
    """Notation lines to append to a block."""

    lines: list[str] = Field(min_length=1)


class RemoveLineRequest(BaseModel):
    """Line of a row or section to remove."""

    macro_line: str = Field(min_length=1)


class UpdateQuantityRequest(BaseModel):
    """New quantity for a food line."""

    macro_line: str = Field(min_length=1)
    grams: float = Field(gt=0)

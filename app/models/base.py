from typing import Any, Mapping, TypeVar, Union

from pydantic import BaseModel, ConfigDict

Number = Union[int, float]

# BSON stores integers as signed 64-bit values.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

RecordT = TypeVar("RecordT", bound="RecordModel")


class RecordModel(BaseModel):
    """Stored record. MongoDB's ``_id`` never leaves the repository layer."""

    model_config = ConfigDict(
        populate_by_name=True,
        coerce_numbers_to_str=True,
        from_attributes=True
    )

    @classmethod
    def from_document(cls: type[RecordT], doc: Mapping[str, Any]) -> RecordT:
        data = dict(doc)
        data.pop("_id", None)
        return cls.model_validate(data)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

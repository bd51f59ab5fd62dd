"""
Shared schema building blocks.
"""
from datetime import date
from typing import Annotated, ClassVar, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Required text: absent, null and "" are all reported as missing fields
RequiredStr = Annotated[str, Field(min_length=1)]


class ORMResponse(BaseModel):
    """Base for response schemas built from ORM objects."""
    model_config = ConfigDict(from_attributes=True)


class PatchModel(BaseModel):
    """
    Base for update schemas. All fields optional.

    Only fields present in the request body are applied
    (model_dump(exclude_unset=True)); an explicit null clears a nullable
    column. Columns listed in `not_null` cannot be cleared.
    """
    not_null: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def _reject_null_on_required(self):
        for field in self.not_null:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} no puede ser nulo")
        return self

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class DateRangeFilter(BaseModel):
    """Inclusive date range; each bound is optional and applied on its own."""
    fecha_desde: Optional[date] = None
    fecha_hasta: Optional[date] = None


class SearchFilter(DateRangeFilter):
    search: Optional[str] = None

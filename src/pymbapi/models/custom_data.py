"""Custom resource value record."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CustomDataRecord(BaseModel):
    """A single resource value fetched during a custom-data sweep.

    ``index`` is the resource's position in the catalog, so indices may
    have gaps when some resources could not be fetched.  Dump with
    ``by_alias=True`` to get the ``{"id", "label", "value"}`` shape.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int = Field(alias="id")
    label: str
    value: str

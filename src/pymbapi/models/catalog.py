"""Resource catalog models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from pymbapi.models._base import MbBaseModel


class ResourceDescriptor(MbBaseModel):
    """One entry of the ``/resources`` list.

    Only ``name`` and ``version`` are used; the provider also sends
    ``href`` and descriptive members, which stay available in ``raw``.
    Scalar values are coerced to strings; nested objects are rejected.
    """

    name: str | None = None
    version: str | None = None

    @field_validator("name", "version", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: object) -> object:
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class CatalogState(BaseModel):
    """Cached result of resource discovery.

    Parameters
    ----------
    fingerprint : int or None
        Number of top-level entries in the last processed resource list.
        ``None`` until a list has been processed.  Two lists of the same
        size share a fingerprint; this is a cheap proxy for a content
        hash and does not detect renamed resources.
    fields : tuple[str, ...]
        Resource names in the order the provider listed them.
    """

    model_config = ConfigDict(frozen=True)

    fingerprint: int | None = None
    fields: tuple[str, ...] = ()

    @property
    def field_list(self) -> str:
        """Comma-joined resource names."""
        return ",".join(self.fields)

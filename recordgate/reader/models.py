"""
Data Reader Models

Immutable request-side values passed into a single read:
- User: who is asking
- Context: why they are asking (declared purpose plus free-form details)
- LeafResource: what is being read and how its records are encoded
- DataReaderRequest: the bundle of the above with the rules to enforce

Design Principles:
- Requests are immutable once built
- The resource identifier stays opaque; only storage interprets it
- The data flavour is derived from the resource, never supplied separately
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from recordgate.rules import Rules
from recordgate.serialisation import DataFlavour


class User(BaseModel):
    """The user a read is performed on behalf of."""
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(
        ...,
        min_length=1,
        description="Unique user identifier"
    )
    roles: frozenset[str] = Field(
        default_factory=frozenset,
        description="Roles held by the user"
    )
    auths: frozenset[str] = Field(
        default_factory=frozenset,
        description="Authorisations held by the user"
    )


class Context(BaseModel):
    """The declared context of a read."""
    model_config = ConfigDict(frozen=True)

    purpose: str | None = Field(
        default=None,
        description="Declared purpose for accessing the data"
    )
    contents: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional context consulted by rules"
    )


class LeafResource(BaseModel):
    """A single readable resource."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque resource identifier, a URI or a plain path"
    )
    type: str = Field(
        ...,
        description="Data type of the records held in the resource"
    )
    serialised_format: str = Field(
        ...,
        description="Encoding of the records, e.g. 'jsonl'"
    )

    @property
    def flavour(self) -> DataFlavour:
        return DataFlavour(data_type=self.type, serialised_format=self.serialised_format)


class DataReaderRequest(BaseModel):
    """
    A request to read one resource under a rule set.

    Immutable; built per read and discarded once the response is written.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resource: LeafResource
    rules: Rules
    user: User
    context: Context = Field(default_factory=Context)

    @property
    def resource_id(self) -> str:
        return self.resource.id

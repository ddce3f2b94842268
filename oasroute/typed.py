"""Request and response wrappers for handlers that work with typed bodies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass
class TypedHandlerRequest(Generic[T]):
    """A dispatched request whose JSON body was decoded into ``data``."""

    method: str
    path: str
    handler_name: str
    path_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    data: T | None = None


@dataclass
class TypedHandlerResponse(Generic[T]):
    """A status code paired with a typed response body."""

    status: int
    body: T


@dataclass
class CreatePetRequest:
    """Body of a request that creates a pet."""

    name: str


@dataclass
class CreatePetResponse:
    """Body returned after a pet was created."""

    id: str
    name: str


def create_pet_handler(req: TypedHandlerRequest[CreatePetRequest]) -> CreatePetResponse:
    """Answer a create-pet request with a fixed identifier and the given name."""
    data: Any = req.data
    return CreatePetResponse(id="pet_1234", name=data.name)
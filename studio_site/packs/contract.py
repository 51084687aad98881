"""Explicit contract a gizmo pack's entry module exposes."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from fastapi import APIRouter, FastAPI

from ..errors import PackContractError

PACK_ATTRIBUTE = "pack"
ROUTE_PREFIX = "/api/gizmos"


class PackKind(str, Enum):
    """Capability a pack declares."""

    REGISTER = "register"
    ROUTER = "router"


@dataclass(frozen=True)
class GizmoPack:
    """Declared by a pack entry module as its module-level `pack`.

    A REGISTER pack provides `register(app)` and mounts itself; a ROUTER
    pack provides an `APIRouter` mounted under /api/gizmos/<id>.
    """

    id: str
    kind: PackKind
    register: Optional[Callable[[FastAPI], Any]] = None
    router: Optional[APIRouter] = None

    def __post_init__(self):
        if not self.id:
            raise PackContractError("pack id must not be empty")
        if not isinstance(self.kind, PackKind):
            raise PackContractError(f"{self.id}: unknown pack kind {self.kind!r}")
        if self.kind is PackKind.REGISTER and not callable(self.register):
            raise PackContractError(f"{self.id}: register packs must provide register(app)")
        if self.kind is PackKind.ROUTER and not isinstance(self.router, APIRouter):
            raise PackContractError(f"{self.id}: router packs must provide an APIRouter")

    @property
    def prefix(self) -> str:
        return f"{ROUTE_PREFIX}/{self.id}"

    def mount(self, app: FastAPI) -> None:
        """Attach the pack to the app according to its kind."""
        if self.kind is PackKind.REGISTER:
            self.register(app)
        else:
            app.include_router(self.router, prefix=self.prefix)


def pack_from_module(module: Any) -> GizmoPack:
    """Return the module's declared pack.

    Raises:
        PackContractError: `pack` is missing or not a GizmoPack
    """
    pack = getattr(module, PACK_ATTRIBUTE, None)
    if not isinstance(pack, GizmoPack):
        raise PackContractError(
            f"{getattr(module, '__name__', module)}: missing module-level "
            f"`{PACK_ATTRIBUTE} = GizmoPack(...)`"
        )
    return pack

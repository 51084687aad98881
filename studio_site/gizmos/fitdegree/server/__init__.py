"""FitDegree gizmo pack (server entry).

Mounts public FitDegree proxies under /api/gizmos/fitdegree, plus a ping
route that proves the pack was mounted.
"""
from fastapi import FastAPI

from studio_site.models import PingResponse
from studio_site.packs import GizmoPack, PackKind

from .router import router

PACK_ID = "fitdegree"


def register(app: FastAPI) -> None:
    @app.get(f"/api/gizmos/{PACK_ID}/public/__ping", response_model=PingResponse)
    async def ping() -> PingResponse:
        return PingResponse(gizmo=PACK_ID)

    app.include_router(router, prefix=f"/api/gizmos/{PACK_ID}")


pack = GizmoPack(id=PACK_ID, kind=PackKind.REGISTER, register=register)

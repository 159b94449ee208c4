"""
===============================================================================
TARJETA CRC — outpass/interfaces/api/http/routers/outpasses.py
===============================================================================

Class/Module:
    Outpass Router

Responsibilities:
    - Exponer el ciclo de vida del pase: crear, decidir, listar, consultar.
    - Emitir el token de checkpoint (texto y PNG con QR).
    - Traducir OutpassError -> RFC7807 (error_mapping).
    - Registrar auditoría best-effort (create / decide).

Collaborators:
    - dependencies.require_capabilities (capacidades por rol)
    - identity.identity_context.require_identity
    - container (factories DI)
    - outpass.audit.emit_audit_event
    - schemas.outpasses (DTOs Pydantic)
    - infrastructure.rendering.QrCodeRenderer

Notas:
    - Las rutas literales (/mine, /stats) se declaran antes de /{outpass_id}.
===============================================================================
"""

from __future__ import annotations

from typing import Literal, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from outpass.application.capabilities import (
    ResidentCapabilities,
    RoleCapabilities,
    SupervisorCapabilities,
)
from outpass.application.usecases.outpass import (
    CheckpointTokenResult,
    ListOutpassesByStatusUseCase,
    ListRequesterOutpassesUseCase,
    OutpassResult,
)
from outpass.audit import emit_audit_event
from outpass.container import (
    get_audit_repository,
    get_list_outpasses_by_status_use_case,
    get_list_requester_outpasses_use_case,
    get_qr_code_renderer,
)
from outpass.crosscutting.error_responses import service_unavailable
from outpass.domain.repositories import AuditEventRepository
from outpass.identity.identity_context import require_identity
from outpass.identity.users import Identity, UserRole
from outpass.infrastructure.rendering import PNG_MEDIA_TYPE, QrCodeRenderer

from ..dependencies import next_offset, require_capabilities
from ..error_mapping import raise_outpass_error
from ..schemas.outpasses import (
    CheckpointTokenRes,
    CreateOutpassReq,
    DecideOutpassReq,
    OutpassesListRes,
    OutpassRes,
    OutpassStatsRes,
)

router = APIRouter()

_STAFF = (UserRole.SUPERVISOR, UserRole.CHECKPOINT_OPERATOR)


def _outpass_or_raise(result: OutpassResult, outpass_id: UUID | None = None) -> OutpassRes:
    if result.error is not None:
        raise_outpass_error(result.error, resource_id=outpass_id)
    if result.request is None:
        raise service_unavailable("Outpass")
    return OutpassRes.from_entity(result.request)


def _token_or_raise(result: CheckpointTokenResult, outpass_id: UUID) -> str:
    if result.error is not None:
        raise_outpass_error(result.error, resource_id=outpass_id)
    if result.token is None:
        raise service_unavailable("Outpass")
    return result.token


# =============================================================================
# Endpoints: colecciones
# =============================================================================


@router.post(
    "/outpasses",
    response_model=OutpassRes,
    status_code=201,
    tags=["outpasses"],
)
def create_outpass(
    req: CreateOutpassReq,
    caps: ResidentCapabilities = Depends(require_capabilities(UserRole.RESIDENT)),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = caps.request_outpass(
        reason=req.reason,
        destination=req.destination,
        window_start=req.window_start,
        window_end=req.window_end,
    )
    res = _outpass_or_raise(result)

    emit_audit_event(
        audit_repo,
        action="outpass.create",
        identity=caps.identity,
        target_id=res.id,
        metadata={"destination": res.destination},
    )
    return res


@router.get(
    "/outpasses",
    response_model=OutpassesListRes,
    tags=["outpasses"],
)
def list_outpasses_by_status(
    status: Optional[Literal["pending", "approved", "rejected"]] = Query(
        None, description="Sin filtro: historial completo (solo supervisor)"
    ),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    use_case: ListOutpassesByStatusUseCase = Depends(
        get_list_outpasses_by_status_use_case
    ),
    identity: Identity = Depends(require_identity(*_STAFF)),
):
    result = use_case.execute(
        actor=identity, status=status, limit=limit, offset=offset
    )
    if result.error is not None:
        raise_outpass_error(result.error)

    return OutpassesListRes(
        outpasses=[OutpassRes.from_entity(r) for r in result.requests],
        next_offset=next_offset(result.requests, limit=limit, offset=offset),
    )


@router.get(
    "/outpasses/mine",
    response_model=OutpassesListRes,
    tags=["outpasses"],
)
def list_my_outpasses(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    caps: ResidentCapabilities = Depends(require_capabilities(UserRole.RESIDENT)),
):
    result = caps.my_outpasses(limit=limit, offset=offset)
    if result.error is not None:
        raise_outpass_error(result.error)

    return OutpassesListRes(
        outpasses=[OutpassRes.from_entity(r) for r in result.requests],
        next_offset=next_offset(result.requests, limit=limit, offset=offset),
    )


@router.get(
    "/outpasses/stats",
    response_model=OutpassStatsRes,
    tags=["outpasses"],
)
def outpass_stats(
    caps: SupervisorCapabilities = Depends(require_capabilities(UserRole.SUPERVISOR)),
):
    result = caps.stats()
    if result.error is not None:
        raise_outpass_error(result.error)
    if result.stats is None:
        raise service_unavailable("Outpass stats")
    return OutpassStatsRes.from_entity(result.stats)


@router.get(
    "/residents/{resident_id}/outpasses",
    response_model=OutpassesListRes,
    tags=["outpasses"],
)
def list_resident_outpasses(
    resident_id: UUID,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    use_case: ListRequesterOutpassesUseCase = Depends(
        get_list_requester_outpasses_use_case
    ),
    identity: Identity = Depends(require_identity()),
):
    result = use_case.execute(
        actor=identity, requester_id=resident_id, limit=limit, offset=offset
    )
    if result.error is not None:
        raise_outpass_error(result.error, resource="Resident", resource_id=resident_id)

    return OutpassesListRes(
        outpasses=[OutpassRes.from_entity(r) for r in result.requests],
        next_offset=next_offset(result.requests, limit=limit, offset=offset),
    )


# =============================================================================
# Endpoints: pase individual
# =============================================================================


@router.get(
    "/outpasses/{outpass_id}",
    response_model=OutpassRes,
    tags=["outpasses"],
)
def get_outpass(
    outpass_id: UUID,
    caps: RoleCapabilities = Depends(require_capabilities()),
):
    return _outpass_or_raise(caps.get_outpass(outpass_id), outpass_id)


@router.post(
    "/outpasses/{outpass_id}/decision",
    response_model=OutpassRes,
    tags=["outpasses"],
)
def decide_outpass(
    outpass_id: UUID,
    req: DecideOutpassReq,
    caps: SupervisorCapabilities = Depends(require_capabilities(UserRole.SUPERVISOR)),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    res = _outpass_or_raise(caps.decide(outpass_id, req.outcome), outpass_id)

    emit_audit_event(
        audit_repo,
        action="outpass.decide",
        identity=caps.identity,
        target_id=outpass_id,
        metadata={"outcome": req.outcome},
    )
    return res


@router.get(
    "/outpasses/{outpass_id}/token",
    response_model=CheckpointTokenRes,
    tags=["checkpoint"],
)
def get_checkpoint_token(
    outpass_id: UUID,
    caps: ResidentCapabilities | SupervisorCapabilities = Depends(
        require_capabilities(UserRole.RESIDENT, UserRole.SUPERVISOR)
    ),
):
    token = _token_or_raise(caps.checkpoint_token(outpass_id), outpass_id)
    return CheckpointTokenRes(outpass_id=outpass_id, token=token)


@router.get(
    "/outpasses/{outpass_id}/token.png",
    response_class=Response,
    responses={200: {"content": {PNG_MEDIA_TYPE: {}}}},
    tags=["checkpoint"],
)
def get_checkpoint_qr(
    outpass_id: UUID,
    caps: ResidentCapabilities | SupervisorCapabilities = Depends(
        require_capabilities(UserRole.RESIDENT, UserRole.SUPERVISOR)
    ),
    renderer: QrCodeRenderer = Depends(get_qr_code_renderer),
):
    token = _token_or_raise(caps.checkpoint_token(outpass_id), outpass_id)
    return Response(
        content=renderer.render_png(token),
        media_type=PNG_MEDIA_TYPE,
        headers={"Cache-Control": "no-store"},
    )

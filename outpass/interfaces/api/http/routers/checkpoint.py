"""
===============================================================================
TARJETA CRC — outpass/interfaces/api/http/routers/checkpoint.py
===============================================================================

Class/Module:
    Checkpoint Router

Responsibilities:
    - Recibir escaneos (QR leído o token tipeado) y registrar el movimiento.
    - Exponer el ledger de movimientos (por pase, por residente o feed).
    - Registrar auditoría best-effort de cada escaneo aceptado.

Collaborators:
    - dependencies.require_capabilities (CheckpointOperatorCapabilities)
    - container.get_list_checkpoint_logs_use_case
    - outpass.audit.emit_audit_event
    - schemas.checkpoint
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from outpass.application.capabilities import CheckpointOperatorCapabilities
from outpass.application.usecases.checkpoint import ListCheckpointLogsUseCase
from outpass.audit import emit_audit_event
from outpass.container import get_audit_repository, get_list_checkpoint_logs_use_case
from outpass.crosscutting.error_responses import service_unavailable
from outpass.domain.repositories import AuditEventRepository
from outpass.identity.identity_context import require_identity
from outpass.identity.users import Identity, UserRole

from ..dependencies import require_capabilities
from ..error_mapping import raise_outpass_error
from ..schemas.checkpoint import CheckpointLogRes, CheckpointLogsRes, CheckpointScanReq

router = APIRouter()


@router.post(
    "/checkpoint/scans",
    response_model=CheckpointLogRes,
    status_code=201,
    tags=["checkpoint"],
)
def record_checkpoint_scan(
    req: CheckpointScanReq,
    caps: CheckpointOperatorCapabilities = Depends(
        require_capabilities(UserRole.CHECKPOINT_OPERATOR)
    ),
    audit_repo: AuditEventRepository | None = Depends(get_audit_repository),
):
    result = caps.scan(req.payload, req.direction, notes=req.notes)
    if result.error is not None:
        raise_outpass_error(result.error, resource_id=result.request_id)
    if result.entry is None:
        raise service_unavailable("Checkpoint")

    entry = result.entry
    emit_audit_event(
        audit_repo,
        action="checkpoint.scan",
        identity=caps.identity,
        target_id=entry.request_id,
        metadata={"direction": entry.direction.value, "is_late": entry.is_late},
    )
    return CheckpointLogRes.from_entity(entry)


@router.get(
    "/checkpoint/logs",
    response_model=CheckpointLogsRes,
    tags=["checkpoint"],
)
def list_checkpoint_logs(
    outpass_id: UUID | None = Query(None),
    resident_id: UUID | None = Query(None),
    limit: int | None = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    use_case: ListCheckpointLogsUseCase = Depends(get_list_checkpoint_logs_use_case),
    identity: Identity = Depends(require_identity()),
):
    """
    - outpass_id: historial del pase (más antiguo primero)
    - sin outpass_id: actividad reciente (más reciente primero)
    """
    result = use_case.execute(
        actor=identity,
        request_id=outpass_id,
        resident_id=resident_id,
        limit=limit,
        offset=offset,
    )
    if result.error is not None:
        raise_outpass_error(result.error, resource_id=outpass_id)

    return CheckpointLogsRes(
        entries=[CheckpointLogRes.from_entity(e) for e in result.entries],
        next_offset=result.next_offset,
    )

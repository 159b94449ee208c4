"""
Checkpoint Use Cases (package exports)

- VerifyCheckpointScanUseCase: decode -> verify -> append al ledger
- ListCheckpointLogsUseCase: consulta del ledger
"""

from __future__ import annotations

from .checkpoint_results import CheckpointLogListResult, CheckpointLogResult
from .list_checkpoint_logs import ListCheckpointLogsUseCase
from .verify_checkpoint_scan import (
    VerifyCheckpointScanInput,
    VerifyCheckpointScanUseCase,
)

__all__ = [
    "CheckpointLogListResult",
    "CheckpointLogResult",
    "ListCheckpointLogsUseCase",
    "VerifyCheckpointScanInput",
    "VerifyCheckpointScanUseCase",
]

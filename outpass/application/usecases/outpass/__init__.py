"""
===============================================================================
OUTPASS USE CASES PACKAGE (Public API / Exports)
===============================================================================

Ciclo de vida del pase: crear, decidir, listar, consultar, estadísticas y
emisión del token de checkpoint.
===============================================================================
"""

from __future__ import annotations

# -----------------------------------------------------------------------------
# Use Cases
# -----------------------------------------------------------------------------
from .create_outpass_request import (
    CreateOutpassRequestInput,
    CreateOutpassRequestUseCase,
)
from .decide_outpass_request import (
    DecideOutpassRequestInput,
    DecideOutpassRequestUseCase,
)
from .get_outpass_request import GetOutpassRequestUseCase
from .get_outpass_stats import GetOutpassStatsUseCase
from .issue_checkpoint_token import IssueCheckpointTokenUseCase
from .list_outpass_requests import (
    ListOutpassesByStatusUseCase,
    ListRequesterOutpassesUseCase,
)

# -----------------------------------------------------------------------------
# DTOs / Result models
# -----------------------------------------------------------------------------
from .outpass_results import (
    CheckpointTokenResult,
    OutpassError,
    OutpassErrorCode,
    OutpassListResult,
    OutpassResult,
    OutpassStatsResult,
)

__all__ = [
    # Use Cases
    "CreateOutpassRequestInput",
    "CreateOutpassRequestUseCase",
    "DecideOutpassRequestInput",
    "DecideOutpassRequestUseCase",
    "GetOutpassRequestUseCase",
    "GetOutpassStatsUseCase",
    "IssueCheckpointTokenUseCase",
    "ListOutpassesByStatusUseCase",
    "ListRequesterOutpassesUseCase",
    # DTOs / Result models
    "CheckpointTokenResult",
    "OutpassError",
    "OutpassErrorCode",
    "OutpassListResult",
    "OutpassResult",
    "OutpassStatsResult",
]

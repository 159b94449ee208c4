"""
Use Cases Layer (Business Operations)

Structure
---------
usecases/
├── outpass/      # Lifecycle: create, decide, list, get, stats, token
└── checkpoint/   # Gate verification and log ledger

Usage
-----
    from outpass.application.usecases.outpass import CreateOutpassRequestUseCase
    from outpass.application.usecases.checkpoint import VerifyCheckpointScanUseCase
"""

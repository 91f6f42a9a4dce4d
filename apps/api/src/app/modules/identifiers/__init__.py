"""
Identifiers Module

Allocates human-readable, sortable identifiers:

- AP-YYMMDD## for applications
- AG-YYMMDD## for agent companies
- TK-YYMMDD## for tickets

Sequences come from an atomic per-day counter (sequence_counters table).
Creation paths use persist_with_identifier, which re-allocates when an
insert collides with an identifier that is already stored.

Background Jobs (via APScheduler):
- prune_sequence_counters: Runs daily, removes counters past retention
"""

from .allocator import (
    DuplicateIdentifierError,
    ExhaustedSequenceError,
    UnknownCategoryError,
    allocate,
    persist_with_identifier,
)
from .jobs import register_identifier_jobs
from .models import IdentifierCategory

__all__ = [
    "IdentifierCategory",
    "allocate",
    "persist_with_identifier",
    "register_identifier_jobs",
    "UnknownCategoryError",
    "ExhaustedSequenceError",
    "DuplicateIdentifierError",
]

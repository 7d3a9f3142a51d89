"""kovocab core: records, durable stores, errors, settings and logging.

Everything else in kovocab builds on these primitives; nothing in ``core``
talks to an external service.
"""

from kovocab.core.errors import (
    BatchFailedError,
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ExternalServiceError,
    IngestionError,
    InvalidTransitionError,
    ItemValidationError,
    KovocabError,
    MalformedResponseError,
    RateLimitedError,
    RetriesExhaustedError,
    StoreCorruptError,
    StoreNotFoundError,
)
from kovocab.core.models import (
    CONCERN_KEYS,
    DEFINABLE_POS,
    POS_TAGS,
    Concern,
    Entry,
    LemmaEntry,
    Pos,
    Store,
    TermEntry,
)
from kovocab.core.store import (
    LemmaStore,
    RecordStore,
    TermStore,
    atomic_write_json,
    ensure_all_keys_present,
    read_json,
)

__all__ = [
    # Errors
    "KovocabError",
    "ErrorCategory",
    "ErrorContext",
    "ConfigurationError",
    "StoreNotFoundError",
    "StoreCorruptError",
    "IngestionError",
    "RateLimitedError",
    "ExternalServiceError",
    "RetriesExhaustedError",
    "MalformedResponseError",
    "ItemValidationError",
    "InvalidTransitionError",
    "BatchFailedError",
    # Models
    "Entry",
    "Concern",
    "TermEntry",
    "LemmaEntry",
    "Pos",
    "Store",
    "POS_TAGS",
    "DEFINABLE_POS",
    "CONCERN_KEYS",
    # Stores
    "RecordStore",
    "TermStore",
    "LemmaStore",
    "ensure_all_keys_present",
    "atomic_write_json",
    "read_json",
]

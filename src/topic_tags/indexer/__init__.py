"""External indexer driver."""

from .driver import (
    IndexerFailedError,
    IndexerInvocation,
    IndexerLaunchError,
    IndexerRunResult,
    IndexerTimeoutError,
    build_invocation,
    index_output_path,
    run_indexer,
)

__all__ = [
    "IndexerFailedError",
    "IndexerInvocation",
    "IndexerLaunchError",
    "IndexerRunResult",
    "IndexerTimeoutError",
    "build_invocation",
    "index_output_path",
    "run_indexer",
]

"""
Value Objects for Domain Layer.

Type aliases shared between the normalizer, the screening engine and the
provider adapters.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Tuple

# =============================================================================
# Type Aliases for improved readability
# =============================================================================

# Unstructured upstream record (schema varies by provider endpoint)
RawRecord = Mapping[str, Any]

# Progress callback: (completed, total)
ProgressCallback = Callable[[int, int], None]

# Outcome of a single criterion check: (passes, rejection reason)
CheckResult = Tuple[bool, str]

# Rejection reasons: code -> reason string
RejectionReasonsDict = Dict[str, str]

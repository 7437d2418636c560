"""
Engine exceptions.

The engine has one real failure mode: malformed input reaching a scan
batch. Everything else (empty batch, missing citation, no prior score)
is a valid domain state with defined defaults.
"""

from typing import Optional


class EngineError(Exception):
    """Base exception for the visibility engine."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class MalformedResponseAnalysis(EngineError):
    """A response analysis was rejected when added to a scan batch."""

    def __init__(self, reason: str, platform: Optional[str] = None, index: Optional[int] = None):
        self.reason = reason
        self.platform = platform
        self.index = index
        message = f"Malformed response analysis: {reason}"
        if platform:
            message += f" (platform={platform})"
        if index is not None:
            message += f" at position {index}"
        super().__init__(message)


class ScanBatchSealedError(EngineError):
    """Attempted to add a response to a batch that is already being scored."""

    def __init__(self, scan_id: Optional[str] = None):
        self.scan_id = scan_id
        message = "Scan batch is sealed; no further responses can be added"
        if scan_id:
            message += f" (scan_id={scan_id})"
        super().__init__(message)


class ConfigurationError(EngineError):
    """Scoring configuration is inconsistent or could not be loaded."""
    pass

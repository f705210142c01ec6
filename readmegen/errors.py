"""Error taxonomy surfaced by readmegen runs."""

from __future__ import annotations

from typing import Dict


class ReadmeGenError(RuntimeError):
    """Base class for every error a run can surface to its caller."""

    kind = "error"
    auth_may_help = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "error": str(self),
            "kind": self.kind,
            "auth_may_help": self.auth_may_help,
        }


class ConfigError(ReadmeGenError):
    """Raised when the configuration file cannot be parsed."""

    kind = "config_error"


class MalformedInput(ReadmeGenError):
    """The repository reference could not be parsed."""

    kind = "malformed_input"


class HostError(ReadmeGenError):
    """Failure reported by the repository host."""

    kind = "host_error"

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFound(HostError):
    # Private repositories answer 404 to anonymous callers.
    kind = "not_found"
    auth_may_help = True


class AccessDenied(HostError):
    kind = "access_denied"
    auth_may_help = True


class RateLimited(HostError):
    kind = "rate_limited"
    auth_may_help = True


class GenerationError(ReadmeGenError):
    """The generative-text provider failed or returned nothing."""

    kind = "generation_failed"


class RunCancelled(ReadmeGenError):
    """The caller aborted the run."""

    kind = "cancelled"


__all__ = [
    "AccessDenied",
    "ConfigError",
    "GenerationError",
    "HostError",
    "MalformedInput",
    "NotFound",
    "RateLimited",
    "ReadmeGenError",
    "RunCancelled",
]

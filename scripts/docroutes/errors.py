"""Error types for link resolution, resource loading and index building."""

from __future__ import annotations

from typing import Any, Optional


class DocRoutesError(Exception):
    """Base error for the docroutes package.

    Attributes:
        message: Human-readable error description.
        file: Path to the resource that caused the error, if any.
        error_type: Machine-readable error category.
    """

    default_type = "docroutes_error"

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        error_type: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        self.error_type = error_type or self.default_type

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.file:
            parts.append(f"file: {self.file}")
        return " | ".join(parts)


# ---------------------------------------------------------------------------
# Resolution errors (recoverable, surfaced to callers of resolve)
# ---------------------------------------------------------------------------


class ResolutionError(DocRoutesError):
    """A link could not be resolved to a route."""

    default_type = "resolution_failed"


class UnknownModuleError(ResolutionError):
    """A path segment does not name a nested module."""

    default_type = "unknown_module"


class NoCategoryError(ResolutionError):
    """The link head resolves to nothing documentable."""

    default_type = "no_category"


class EmptyLinkHeadError(ResolutionError):
    """The link body has no first segment."""

    default_type = "empty_link_head"


class UnknownFieldError(ResolutionError):
    """A path segment is neither a field nor a parameter of the value."""

    default_type = "unknown_field"


# ---------------------------------------------------------------------------
# Fatal errors (raised while loading data or building the index)
# ---------------------------------------------------------------------------


class RegistryLoadError(DocRoutesError):
    """Bundled group or library data is malformed."""

    default_type = "registry_load"


class IndexBuildError(DocRoutesError):
    """The symbol index build hit a structural invariant violation."""

    default_type = "index_build"


class ConfigError(DocRoutesError):
    """Error in docroutes configuration."""

    default_type = "config_invalid"

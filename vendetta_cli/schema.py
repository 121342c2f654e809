"""Pydantic schemas for vendetta settings files."""

from pydantic import BaseModel
from pydantic import Field


class ProjectConfig(BaseModel):
    """Identification of the project's own code."""

    names: list[str] = Field(
        default_factory=list,
        description="Import paths of the project, e.g. 'github.com/user/proj'. Several names are allowed.",
    )


class VendorConfig(BaseModel):
    """Default behaviour of a sync run."""

    update: bool = Field(default=False, description="Update used submodules from their remotes")
    prune: bool = Field(default=False, description="Remove submodules nothing imports")


class ResolutionConfig(BaseModel):
    """Import resolution behaviour."""

    remote_probe: bool = Field(
        default=False, description="Ask unknown hosting sites for go-import metadata over HTTPS"
    )
    probe_timeout: float = Field(default=10.0, gt=0, description="Timeout in seconds for the remote probe")
    strict_import_comments: bool = Field(
        default=False, description="Treat a mismatching declared import path as an error instead of a warning"
    )


class HostingEntry(BaseModel):
    """Hosting site whose repositories live at fixed URLs."""

    segments: int = Field(..., ge=1, description="Leading import path segments forming the repository root")
    repos: dict[str, str] = Field(
        default_factory=dict, description="Repository URL keyed by the last segment of the root"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    path: str | None = Field(None, description="JSONL log file; disabled when unset")
    level: str = Field(default="INFO", description="Log level for the JSONL sink")


class VendettaSettings(BaseModel):
    """Complete merged settings."""

    project: ProjectConfig = Field(default_factory=ProjectConfig)
    vendor: VendorConfig = Field(default_factory=VendorConfig)
    resolution: ResolutionConfig = Field(default_factory=ResolutionConfig)
    hosting: dict[str, HostingEntry] = Field(default_factory=dict, description="Extra hosting sites by domain")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

"""Pydantic models for baseplate set configuration files."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gridfinity.domain import BaseplateOption, PhysicalSize

# Version 1.0: Initial baseplate set schema
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class SizeConfig(BaseModel):
    """A width x depth rectangle in millimeters."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    width: float = Field(..., gt=0)
    depth: float = Field(..., gt=0)

    def to_domain(self) -> PhysicalSize:
        return PhysicalSize(self.width, self.depth)


class OutputConfig(BaseModel):
    """Where and what to export.

    Attributes:
        directory: Output directory for generated files.
        assembly: Also write every piece arranged in one STL file.
        plan_json: Also write the plan as JSON.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    directory: str = "output"
    assembly: bool = True
    plan_json: bool = True


class BaseplateSetConfiguration(BaseModel):
    """Root configuration model for a baseplate set.

    Attributes:
        schema_version: Version string in format "major.minor" (e.g., "1.0")
        footprint: Area to cover, usually the inside of a drawer.
        printbed: Largest piece the printer can produce.
        front_padding: Non-grid space reserved in front of the grid.
        padding_chamfer: Bottom chamfer on spacer pieces.
        options: Baseplate options applied to every baseplate piece.
        tolerance: Clearance around sockets, nut traps and bolt holes.
        stack_spacing: Gap between pieces in the assembly file.
        output: Export settings.

    Example:
        >>> config = BaseplateSetConfiguration(
        ...     schema_version="1.0",
        ...     footprint=SizeConfig(width=508, depth=332),
        ...     printbed=SizeConfig(width=256, depth=256),
        ... )
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    footprint: SizeConfig
    printbed: SizeConfig
    front_padding: float = Field(default=0.0, ge=0)
    padding_chamfer: float = Field(default=1.0, ge=0)
    options: list[BaseplateOption] = Field(default_factory=lambda: [BaseplateOption.TABS])
    tolerance: float = Field(default=0.2, ge=0, le=2.0)
    stack_spacing: float = Field(default=1.0, ge=0)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of the same major."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @field_validator("options")
    @classmethod
    def validate_unique_options(cls, v: list[BaseplateOption]) -> list[BaseplateOption]:
        """Reject options listed more than once."""
        if len(set(v)) != len(v):
            raise ValueError("options must not contain duplicates")
        return v

    @property
    def option_set(self) -> frozenset[BaseplateOption]:
        return frozenset(self.options)

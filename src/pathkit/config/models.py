from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False
    sample_every: int = 1

    @field_validator("sample_every")
    def _positive(cls, v: int, info: ValidationInfo) -> int:
        if v < 1:
            raise ValueError(f"{info.field_name} must be >= 1")
        return v


# ----------------- PIVOT SELECTORS ---------------------


class PivotSelectorRandomModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["random"] = "random"
    seed: int | None = None  # None => derive from the toolkit seed


class PivotSelectorSequenceModel(BaseModel):
    """Replay fixed pivot indices; reproducible trees for tests."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["sequence"] = "sequence"
    indices: list[int]

    @field_validator("indices")
    def _nonneg(cls, v: list[int], info: ValidationInfo) -> list[int]:
        if any(i < 0 for i in v):
            raise ValueError(f"{info.field_name} must all be >= 0")
        return v


class PivotSelectorFirstModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["first"] = "first"


PivotSelectorUnion = Annotated[
    PivotSelectorRandomModel | PivotSelectorSequenceModel | PivotSelectorFirstModel,
    Field(discriminator="kind"),
]


# ------------------------------------------------------------------


class IndexModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    pivot: PivotSelectorUnion = Field(default_factory=PivotSelectorRandomModel)


class ToolkitModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "pathkit"
    seed: int = 123
    log: LogModel = LogModel()
    index: IndexModel = IndexModel()

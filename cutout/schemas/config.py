from __future__ import annotations
import os
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Literal, List, Optional, Tuple

StrategyName = Literal["advanced", "flood_fill", "statistical", "edge", "forced"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class AcceptanceBand(_Frozen):
    min_removed_pct: float
    max_removed_pct: float
    max_regions: Optional[int] = None   # None = region count not checked
    validate_preservation: bool = True

    @model_validator(mode="after")
    def _check_order(self) -> "AcceptanceBand":
        if self.min_removed_pct > self.max_removed_pct:
            raise ValueError("min_removed_pct must be <= max_removed_pct")
        return self


class ValidatorConfig(_Frozen):
    center_fraction: float = 0.3         # side of the central window vs min(w, h)
    max_center_removal: float = 0.12
    core_fraction: float = 0.25          # window searched for problematic holes
    max_hole_fraction: float = 0.05      # of total image area


class AdvancedDetectionConfig(_Frozen):
    tolerances: List[float] = Field(default_factory=lambda: [35, 55, 75, 95])
    band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=15, max_removed_pct=80, max_regions=6))


class FloodFillConfig(_Frozen):
    tolerance: float = 40
    max_fraction: float = 0.65           # global cap on absorbed pixels
    band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=10, max_removed_pct=85))


class StatisticalConfig(_Frozen):
    top_colors: int = 7
    min_frequency_pct: float = 8.0
    min_background_score: float = 0.5
    score_tolerance: float = 40
    tolerances: List[float] = Field(default_factory=lambda: [40, 60, 80, 100])
    band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=15, max_removed_pct=80))


class EdgeProcessingConfig(_Frozen):
    band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=10, max_removed_pct=85))


class ForcedRemovalConfig(_Frozen):
    min_coverage_pct: float = 15.0
    coverage_tolerance: float = 50
    tolerances: List[float] = Field(default_factory=lambda: [50, 70, 90, 110])
    corner_color_band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=10, max_removed_pct=80))
    light_band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=8, max_removed_pct=70))
    corner_blocks_band: AcceptanceBand = Field(default_factory=lambda: AcceptanceBand(
        min_removed_pct=5, max_removed_pct=100, validate_preservation=False))


class CascadeConfig(_Frozen):
    method_order: List[StrategyName] = Field(
        default_factory=lambda: ["advanced", "flood_fill", "statistical", "edge", "forced"])
    min_contrast_std: float = 1.0        # below this the image is treated as flat
    advanced: AdvancedDetectionConfig = Field(default_factory=AdvancedDetectionConfig)
    flood_fill: FloodFillConfig = Field(default_factory=FloodFillConfig)
    statistical: StatisticalConfig = Field(default_factory=StatisticalConfig)
    edge: EdgeProcessingConfig = Field(default_factory=EdgeProcessingConfig)
    forced: ForcedRemovalConfig = Field(default_factory=ForcedRemovalConfig)
    validator: ValidatorConfig = Field(default_factory=ValidatorConfig)

    @model_validator(mode="after")
    def _forced_is_last(self) -> "CascadeConfig":
        # ForcedRemoval is the only stage that always terminates
        if not self.method_order or self.method_order[-1] != "forced":
            raise ValueError("method_order must end with 'forced'")
        return self


class SynthesizerConfig(_Frozen):
    n_samples: int = 1000
    seed: Optional[int] = 0
    weights: Tuple[float, float, float, float] = (0.3, 0.25, 0.25, 0.2)
    sigmoid_gain: float = 5.0
    threshold: float = 0.3
    # "literal": far from sampled colors scores high; "inverted": 1 - that
    cluster_polarity: Literal["literal", "inverted"] = "literal"
    morphology: bool = True


class RemoteConfig(_Frozen):
    enabled: bool = False
    api_key: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.enabled and bool(self.api_key)

    @classmethod
    def from_env(cls) -> "RemoteConfig":
        return cls(
            enabled=os.environ.get("ENABLE_REMOVE_BG_API", "").lower() == "true",
            api_key=os.environ.get("REMOVE_BG_API_KEY") or None,
        )


class PathsConfig(BaseModel):
    input_dir: str
    output_dir: str
    masks_dir: str
    logs_dir: str


class RunConfig(BaseModel):
    limit: int = 300
    save_debug: bool = False             # also write the alpha mask per image
    mode: Literal["cascade", "multilayer"] = "cascade"


class AppConfig(BaseModel):
    paths: PathsConfig
    run: RunConfig = Field(default_factory=RunConfig)
    cascade: CascadeConfig = Field(default_factory=CascadeConfig)
    synthesizer: SynthesizerConfig = Field(default_factory=SynthesizerConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)

from __future__ import annotations
from abc import ABC, abstractmethod
import logging
from typing import Optional
import numpy as np

from ..schemas.config import AcceptanceBand, ValidatorConfig
from ..schemas.models import MethodResult
from ..metrics.mask_stats import analyze_mask_statistics
from ..qc.rules import evaluate_mask


class Masker(ABC):
    @abstractmethod
    def get_mask(self, image_rgb: np.ndarray) -> np.ndarray:
        """Return alpha mask (uint8 0..255), same HxW as image."""
        raise NotImplementedError


class CascadeStrategy(ABC):
    """One stage of the removal cascade. `attempt` never raises for a rejected mask."""
    name: str = "strategy"

    def __init__(self, validator: ValidatorConfig, logger: logging.Logger) -> None:
        self.validator = validator
        self.logger = logger

    @abstractmethod
    def attempt(self, image_rgb: np.ndarray) -> MethodResult:
        raise NotImplementedError

    def judge(self, mask: np.ndarray, band: AcceptanceBand,
              tolerance: Optional[float] = None, label: Optional[str] = None) -> MethodResult:
        """Score a candidate mask against an acceptance band and the preservation check."""
        stats = analyze_mask_statistics(mask)
        verdict = evaluate_mask(mask, stats, band, self.validator)
        tol = f"tolerance {tolerance:g}: " if tolerance is not None else ""
        self.logger.info(
            f"     {tol}{stats.removed_percentage:.1f}% removed, "
            f"{stats.connected_regions} regions → {'accept' if verdict.passed else verdict.reason}"
        )
        return MethodResult(
            method=label or self.name,
            accepted=verdict.passed,
            mask=mask if verdict.passed else None,
            stats=stats,
            tolerance=tolerance,
            detail="" if verdict.passed else verdict.reason,
        )

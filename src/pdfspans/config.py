import math
from dataclasses import dataclass


class ConfigValidationError(ValueError):
    """Raised when a configuration field has an invalid value."""


def _check_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ConfigValidationError(f"{name}={value} must be finite")


def _check_positive(name: str, value: float) -> None:
    _check_finite(name, value)
    if value <= 0:
        raise ConfigValidationError(f"{name}={value} must be > 0")


def _check_non_negative(name: str, value: float) -> None:
    _check_finite(name, value)
    if value < 0:
        raise ConfigValidationError(f"{name}={value} must be >= 0")


@dataclass(frozen=True)
class MergeOptions:
    """Tolerances used when deciding whether two runs form one span."""

    # Max vertical baseline deviation (page units) for the "same line".
    baseline_tolerance: float = 2.0
    # Factor applied to the expected single-space gap before two runs are
    # treated as separated by a real word boundary.
    space_multiplier: float = 1.5

    def __post_init__(self) -> None:
        """Validate field ranges to catch misconfiguration early."""
        for name in ("baseline_tolerance", "space_multiplier"):
            _check_non_negative(name, getattr(self, name))


DEFAULT_MERGE_OPTIONS = MergeOptions()


@dataclass
class GroupingConfig:
    """Tunables for line/block aggregation, bucketing and rendering.

    The block multipliers are empirical: they were picked against sample
    documents and are expected to be tuned per corpus.
    """

    # Baseline gap (in dominant font sizes) beyond which a new block starts.
    block_gap_mult: float = 1.5
    # Left-edge shift (in dominant font sizes) beyond which a new block starts.
    block_indent_mult: float = 3.0
    # Quantisation step (points) for row buckets.
    row_quantum: float = 1.0
    # Quantisation step (points) for column buckets.
    column_quantum: float = 1.0
    # Gap between adjacent spans (in font sizes) that earns an inserted space.
    space_gap_ratio: float = 0.1

    def __post_init__(self) -> None:
        """Validate field ranges to catch misconfiguration early."""
        # -- Strictly positive floats --
        _pos_floats = [
            "block_gap_mult",
            "block_indent_mult",
            "row_quantum",
            "column_quantum",
        ]
        for name in _pos_floats:
            _check_positive(name, getattr(self, name))

        # -- Non-negative floats --
        _check_non_negative("space_gap_ratio", self.space_gap_ratio)

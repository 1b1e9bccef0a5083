"""
Configuration for the geometry engine.

Defines the tolerances used by the transform, region and triangulation
predicates, plus a few hints for renderers.
"""

from dataclasses import dataclass, replace
import json
from pathlib import Path


@dataclass
class GeometryConfig:
    """
    Tolerances for floating-point geometric predicates.

    Attributes:
        point_tolerance: Per-axis tolerance for point equality, point-on-segment
            tests and deduplication of self-intersection points
        parallel_tolerance: Denominator below which two edges are parallel
        collinear_tolerance: Circumcenter determinant below which a triple is collinear
        singular_tolerance: Determinant below which a transform is not invertible
        convexity_tolerance: Cross product magnitude treated as a collinear turn
        arrow_length: Length of the inside-pointing edge arrows (renderer hint)
    """
    # Predicates
    point_tolerance: float = 1e-6
    parallel_tolerance: float = 1e-12
    collinear_tolerance: float = 1e-10
    singular_tolerance: float = 1e-12
    convexity_tolerance: float = 1e-9

    # Rendering hints
    arrow_length: float = 20.0

    def validate(self) -> list[str]:
        """
        Validate configuration values.

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        for name in ("point_tolerance", "parallel_tolerance", "collinear_tolerance",
                     "singular_tolerance", "convexity_tolerance"):
            value = getattr(self, name)
            if value <= 0:
                errors.append(f"{name} must be positive, got {value}")

        if self.arrow_length < 0:
            errors.append(f"arrow_length cannot be negative, got {self.arrow_length}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "point_tolerance": self.point_tolerance,
            "parallel_tolerance": self.parallel_tolerance,
            "collinear_tolerance": self.collinear_tolerance,
            "singular_tolerance": self.singular_tolerance,
            "convexity_tolerance": self.convexity_tolerance,
            "arrow_length": self.arrow_length,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GeometryConfig":
        """Create from dictionary, using defaults for missing keys."""
        defaults = cls()
        return cls(
            point_tolerance=data.get("point_tolerance", defaults.point_tolerance),
            parallel_tolerance=data.get("parallel_tolerance", defaults.parallel_tolerance),
            collinear_tolerance=data.get("collinear_tolerance", defaults.collinear_tolerance),
            singular_tolerance=data.get("singular_tolerance", defaults.singular_tolerance),
            convexity_tolerance=data.get("convexity_tolerance", defaults.convexity_tolerance),
            arrow_length=data.get("arrow_length", defaults.arrow_length),
        )

    def save(self, filepath: Path | str) -> None:
        """Save configuration to JSON file."""
        filepath = Path(filepath)
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: Path | str) -> "GeometryConfig":
        """
        Load configuration from JSON file.

        Returns defaults if the file doesn't exist.

        Raises:
            ValueError: If the stored values fail validation.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            return cls()

        with open(filepath, 'r') as f:
            data = json.load(f)
        config = cls.from_dict(data)

        errors = config.validate()
        if errors:
            raise ValueError(f"Invalid geometry config in {filepath}: " + "; ".join(errors))
        return config

    def scaled(self, factor: float) -> "GeometryConfig":
        """Return a copy with every predicate tolerance multiplied by factor."""
        return replace(
            self,
            point_tolerance=self.point_tolerance * factor,
            parallel_tolerance=self.parallel_tolerance * factor,
            collinear_tolerance=self.collinear_tolerance * factor,
            singular_tolerance=self.singular_tolerance * factor,
            convexity_tolerance=self.convexity_tolerance * factor,
        )


DEFAULT_CONFIG = GeometryConfig()

# Tolerance presets for inputs of different coordinate magnitude
TOLERANCE_PRESETS = {
    "strict": DEFAULT_CONFIG.scaled(1e-3),
    "default": DEFAULT_CONFIG,
    "loose": DEFAULT_CONFIG.scaled(1e3),   # screen-space coordinates in the thousands
}

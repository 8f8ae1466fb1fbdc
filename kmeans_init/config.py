"""Configuration dataclasses for kmeans_init."""

from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any

from .clustering.init_strategy import resolve_strategy


@dataclass
class SeedingConfig:
    """Configuration for center initialization.

    Attributes:
        strategy: Init strategy name: "random", "plus_plus" or "parallel".
        n_clusters: Number of centers (k).
        seed: Random seed for reproducibility.
        n_workers: Threads used for per-point scoring (None = inline).
    """
    strategy: str = "plus_plus"
    n_clusters: int = 8
    seed: Optional[int] = 42
    n_workers: Optional[int] = None

    def seed_range(self, n_runs: int) -> range:
        """Consecutive seeds starting at ``seed`` (0 when unset)."""
        first = self.seed if self.seed is not None else 0
        return range(first, first + n_runs)


@dataclass
class InputConfig:
    """Configuration for loading input vectors.

    Attributes:
        path: Delimited text file with numeric values (None = synthetic).
        dimensions: Vector dimension used to group values.
    """
    path: Optional[str] = None
    dimensions: int = 2


@dataclass
class KMeansInitConfig:
    """Master configuration for kmeans_init.

    Combines all sub-configurations into a single object.
    """
    seeding: SeedingConfig = field(default_factory=SeedingConfig)
    input: InputConfig = field(default_factory=InputConfig)

    def __post_init__(self):
        """Validate settings and normalize the strategy name."""
        if self.seeding.n_clusters <= 0:
            raise ValueError(
                f"n_clusters must be positive, got {self.seeding.n_clusters}"
            )
        if self.input.dimensions <= 0:
            raise ValueError(
                f"dimensions must be positive, got {self.input.dimensions}"
            )
        self.seeding.strategy = resolve_strategy(self.seeding.strategy).value

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to nested dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KMeansInitConfig":
        """Create config from dictionary."""
        return cls(
            seeding=SeedingConfig(**d.get("seeding", {})),
            input=InputConfig(**d.get("input", {})),
        )

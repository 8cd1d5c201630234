"""
scalargrad training configuration.

Network shape and optimizer settings for the training loop live here.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class TrainingConfig:
    """Configuration for training an MLP with plain gradient descent."""

    # Network: widths of each layer after the input, last one is the output
    layer_widths: list[int] = field(default_factory=lambda: [16, 16, 1])

    # Optimizer
    learning_rate: float = 0.01
    epochs: int = 100

    # Reporting: log losses every N epochs (and always on the last one)
    log_every: int = 10

    # Seed for weight initialization (None = numpy's global random state)
    seed: Optional[int] = None

    def __post_init__(self):
        if not self.layer_widths or any(w <= 0 for w in self.layer_widths):
            raise ValueError(f"layer_widths must be non-empty positive ints, got {self.layer_widths}")
        if self.learning_rate <= 0:
            raise ValueError(f"learning_rate must be positive, got {self.learning_rate}")
        if self.epochs <= 0:
            raise ValueError(f"epochs must be positive, got {self.epochs}")
        if self.log_every <= 0:
            raise ValueError(f"log_every must be positive, got {self.log_every}")

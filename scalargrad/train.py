"""
Gradient descent training for scalargrad networks.

Each epoch zeroes the parameter gradients, runs forward and backward once per
sample (so gradients accumulate over the whole batch), then applies a single
update to every parameter.
"""

import logging
from dataclasses import dataclass, field

import numpy as np

from scalargrad.config import TrainingConfig
from scalargrad.engine import Value
from scalargrad.nn import MLP

logger = logging.getLogger(__name__)


@dataclass
class TrainingHistory:
    """Mean loss per epoch, train and (optionally) test."""

    train_losses: list[float] = field(default_factory=list)
    test_losses: list[float] = field(default_factory=list)


def _check_batch(xs, ys):
    if len(xs) != len(ys):
        raise ValueError(f"Got {len(xs)} samples but {len(ys)} targets")
    if not xs:
        raise ValueError("Need at least one sample")


def squared_error(pred, target):
    """(pred - target)^2 as a graph node."""
    diff = pred - target
    return diff * diff


def build_model(nin, config):
    """Create an MLP with the configured widths, seeded if config.seed is set."""
    rng = np.random.default_rng(config.seed) if config.seed is not None else None
    return MLP(nin, config.layer_widths, rng=rng)


def train_epoch(model, xs, ys, learning_rate):
    """
    Run one gradient descent step over the whole batch.

    Args:
        model: Module whose call returns a list of output Values
        xs: List of input samples
        ys: List of targets (numbers or Values), one per sample
        learning_rate: Step size

    Returns:
        float: Mean squared error over the batch, measured before the update
    """
    _check_batch(xs, ys)

    model.zero_grad()

    n = len(xs)
    total_loss = 0.0
    for x, y in zip(xs, ys):
        pred = model(x)[0]
        loss = squared_error(pred, y)
        total_loss += loss.data
        # Gradients accumulate over the batch; scaling each sample by 1/n
        # leaves the parameters holding the gradient of the mean loss
        (loss * (1.0 / n)).backward()

    for p in model.parameters():
        p.update(learning_rate)

    return total_loss / n


def evaluate(model, xs, ys):
    """Mean squared error over a batch without touching gradients."""
    _check_batch(xs, ys)
    total_loss = 0.0
    for x, y in zip(xs, ys):
        total_loss += squared_error(model(x)[0], y).data
    return total_loss / len(xs)


def predict(model, x):
    """Forward pass returning plain floats."""
    return [out.data for out in model(x)]


def fit(model, xs, ys, config=None, test_xs=None, test_ys=None):
    """
    Train model for config.epochs epochs.

    Logs the train loss (and test loss when a test set is given) every
    config.log_every epochs and on the final epoch.

    Returns:
        TrainingHistory
    """
    config = config or TrainingConfig()
    if (test_xs is None) != (test_ys is None):
        raise ValueError("test_xs and test_ys must be given together")
    has_test = test_xs is not None
    history = TrainingHistory()

    logger.info(
        f"[Train] {len(xs)} train samples, {len(test_xs) if has_test else 0} test samples, "
        f"{len(model.parameters())} parameters, lr={config.learning_rate}"
    )

    for epoch in range(config.epochs):
        train_loss = train_epoch(model, xs, ys, config.learning_rate)
        history.train_losses.append(train_loss)

        msg = f"[Train] Epoch {epoch}: train loss = {train_loss:.6f}"
        if has_test:
            test_loss = evaluate(model, test_xs, test_ys)
            history.test_losses.append(test_loss)
            msg += f" | test loss = {test_loss:.6f}"

        if epoch % config.log_every == 0 or epoch == config.epochs - 1:
            logger.info(msg)
        else:
            logger.debug(msg)

    return history


def as_values(rows):
    """Wrap nested lists of numbers as leaf Values."""
    return [[Value(v) for v in row] for row in rows]

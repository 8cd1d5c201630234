"""
scalargrad training demo: fit an MLP to y = x1 + x2 with plain gradient descent.

Trains a 2 -> 16 -> 16 -> 1 network on six samples, reports the loss on two
held-out samples, then prints predictions for both sets.

    python examples/basic_training.py
"""

import logging

from scalargrad import TrainingConfig
from scalargrad.train import as_values, build_model, fit, predict

logging.basicConfig(level=logging.INFO, format="%(message)s")


# -- Data: y = x1 + x2 -------------------------------------------------------

xs = as_values([
    [0.0, 0.0],
    [0.0, 1.0],
    [1.0, 0.0],
    [1.0, 1.0],
    [0.5, 0.5],
    [0.2, 0.3],
    [0.7, 0.8],
    [0.1, 0.9],
])
ys = [x1.data + x2.data for x1, x2 in xs]

# 75% train, 25% test
train_xs, train_ys = xs[:6], ys[:6]
test_xs, test_ys = xs[6:], ys[6:]


# -- Train -------------------------------------------------------------------

config = TrainingConfig(layer_widths=[16, 16, 1], learning_rate=0.01, epochs=100, log_every=10)
model = build_model(2, config)

print("Training a neural network to learn: y = x1 + x2")
print(f"Train set size: {len(train_xs)} | Test set size: {len(test_xs)}\n")

history = fit(model, train_xs, train_ys, config, test_xs=test_xs, test_ys=test_ys)

print(f"\nFinal Train Loss: {history.train_losses[-1]:.6f}")
print(f"Final Test Loss: {history.test_losses[-1]:.6f}\n")


# -- Predictions -------------------------------------------------------------

for title, set_xs, set_ys in [("Training", train_xs, train_ys), ("Test", test_xs, test_ys)]:
    print(f"{title} Set Predictions:")
    for x, expected in zip(set_xs, set_ys):
        pred = predict(model, x)[0]
        print(f"  Input: [{x[0].data:.1f}, {x[1].data:.1f}] -> Predicted: {pred:.4f}, Expected: {expected:.1f}")
    print()

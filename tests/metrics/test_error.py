import numpy as np
import pytest

from radio.eval.metrics.error import mae, rmse


def test_rmse_and_mae():
    # arrange
    predicted = np.array([3.0, 5.0, 1.0])
    actual = np.array([4.0, 5.0, 3.0])

    # act / assert — errors are 1, 0, 2
    assert rmse(predicted, actual) == pytest.approx(np.sqrt(5 / 3))
    assert mae(predicted, actual) == pytest.approx(1.0)


def test_empty_input():
    assert rmse([], []) == 0.0
    assert mae([], []) == 0.0

import pytest

from cgraph.randomgen import REAL_RANDOM, generate, generate_matrix


def test_generate_length_and_bounds():
    values = generate(16, 0.0, 1.0)
    assert len(values) == 16
    assert all(0.0 <= v < 1.0 for v in values)


def test_generate_custom_range():
    values = generate(200, -5.0, 5.0, seed=7)
    assert all(-5.0 <= v < 5.0 for v in values)
    assert min(values) < 0.0 < max(values)


def test_fixed_seed_is_reproducible():
    assert generate(10, 0.0, 1.0, seed=42) == generate(10, 0.0, 1.0, seed=42)
    assert generate(10, 0.0, 1.0, seed=42) != generate(10, 0.0, 1.0, seed=43)


def test_real_random_differs_between_calls():
    first = generate(16, 0.0, 1.0, seed=REAL_RANDOM)
    second = generate(16, 0.0, 1.0, seed=REAL_RANDOM)
    assert first != second


def test_zero_dim_is_empty():
    assert generate(0, 0.0, 1.0) == []


def test_matrix_shape_and_bounds():
    matrix = generate_matrix(4, 3, 2.0, 3.0, seed=1)
    assert len(matrix) == 4
    assert all(len(row) == 3 for row in matrix)
    assert all(2.0 <= v < 3.0 for row in matrix for v in row)


def test_matrix_seed_reproducible():
    first = generate_matrix(3, 2, 0.0, 1.0, seed=9)
    second = generate_matrix(3, 2, 0.0, 1.0, seed=9)
    assert len(first) == 3
    assert [len(row) for row in first] == [2, 2, 2]
    assert first == second


def test_invalid_arguments():
    with pytest.raises(ValueError):
        generate(3, 1.0, 0.0)
    with pytest.raises(ValueError):
        generate(-1, 0.0, 1.0)
    with pytest.raises(ValueError):
        generate_matrix(2, -1, 0.0, 1.0)
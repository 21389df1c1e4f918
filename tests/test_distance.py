import pytest

from cgraph.distance import (
    CosineDistance,
    Distance,
    DistanceCalculator,
    EuclideanDistance,
    InnerProductDistance,
)
from cgraph.utils import CGraphError


class _Custom(Distance):
    def calc(self, v1, v2):
        return sum(a * 2 + b / 2 for a, b in zip(v1, v2))


V1 = [0.1, 0.7, 0.3, 0.9]
V2 = [0.5, 0.2, 0.8, 0.4]


def test_euclidean_known_value():
    assert EuclideanDistance().calc([0.0, 0.0], [3.0, 4.0]) == pytest.approx(5.0)


def test_euclidean_self_distance_is_zero():
    assert EuclideanDistance().calc(V1, V1) == 0


def test_euclidean_is_symmetric():
    d = EuclideanDistance()
    assert d.calc(V1, V2) == pytest.approx(d.calc(V2, V1))


def test_euclidean_without_sqrt_is_square():
    plain = EuclideanDistance().calc(V1, V2)
    squared = EuclideanDistance(need_sqrt=False).calc(V1, V2)
    assert squared == pytest.approx(plain**2)


def test_euclidean_check_rejects_mismatched_dims():
    calc = DistanceCalculator(EuclideanDistance(), need_check=True)
    with pytest.raises(CGraphError, match="euclidean distance dim error"):
        calc.calculate([1.0, 2.0], [1.0])


def test_euclidean_check_rejects_empty():
    with pytest.raises(CGraphError):
        EuclideanDistance().check([], [])


def test_base_check_rejects_none_and_empty():
    with pytest.raises(CGraphError, match="nullptr"):
        CosineDistance().check(None, [1.0])
    with pytest.raises(CGraphError, match="input dim error"):
        CosineDistance().check([1.0], [])


def test_without_check_mismatch_is_not_validated():
    calc = DistanceCalculator(EuclideanDistance(), need_check=False)
    assert calc.calculate([3.0, 4.0], [3.0]) == 0


def test_cosine_parallel_vectors():
    assert CosineDistance().calc([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(1.0)


def test_cosine_orthogonal_vectors():
    assert CosineDistance().calc([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)


def test_cosine_zero_vector_is_nan():
    result = CosineDistance().calc([0.0, 0.0], [1.0, 1.0])
    assert str(result) == "nan"


def test_inner_product_orthogonal_is_half():
    assert InnerProductDistance().calc([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.5)


def test_inner_product_identical_normalized_is_zero():
    d = InnerProductDistance()
    v = d.normalize(V1)
    assert d.calc(v, v) == pytest.approx(0.0)


def test_normalize_gives_unit_length():
    calc = DistanceCalculator(CosineDistance(), need_check=True)
    v = calc.normalize(V1)
    assert sum(x * x for x in v) == pytest.approx(1.0)
    assert len(v) == len(V1)


def test_normalize_preserves_direction():
    v = DistanceCalculator().normalize(V2)
    assert CosineDistance().calc(v, V2) == pytest.approx(1.0)


def test_normalize_zero_vector_raises():
    with pytest.raises(CGraphError):
        DistanceCalculator().normalize([0.0, 0.0])


def test_normalize_with_check_rejects_empty():
    with pytest.raises(CGraphError):
        DistanceCalculator(need_check=True).normalize([])


def test_batch_matches_single_calls():
    calc = DistanceCalculator(EuclideanDistance())
    nodes = [V1, V2, [0.0, 0.0, 0.0, 0.0]]
    assert calc.calculate_batch(V1, nodes) == [calc.calculate(V1, n) for n in nodes]


def test_batch_of_nothing_is_empty():
    assert DistanceCalculator().calculate_batch(V1, []) == []


def test_custom_distance_is_asymmetric():
    calc = DistanceCalculator(_Custom())
    assert calc.calculate(V1, V2) != pytest.approx(calc.calculate(V2, V1))


def test_default_calculator_uses_euclidean():
    assert DistanceCalculator().calculate(V1, V2) == pytest.approx(
        EuclideanDistance().calc(V1, V2)
    )


def test_distance_is_abstract():
    with pytest.raises(TypeError):
        Distance()
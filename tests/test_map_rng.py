import pytest

from mapgen.utils.map_rng import MapRNG, ensure_rng


def test_same_seed_same_sequence():
    a = MapRNG(seed=123)
    b = MapRNG(seed=123)
    assert [a.get_int(0, 100) for _ in range(20)] == [b.get_int(0, 100) for _ in range(20)]
    assert a.get_float() == b.get_float()


def test_get_int_is_inclusive():
    rng = MapRNG(seed=1)
    values = {rng.get_int(2, 4) for _ in range(200)}
    assert values == {2, 3, 4}


def test_get_int_rejects_inverted_range():
    with pytest.raises(ValueError):
        MapRNG(seed=1).get_int(5, 4)


def test_get_float_range():
    rng = MapRNG(seed=2)
    for _ in range(100):
        value = rng.get_float(1.0, 3.0)
        assert 1.0 <= value < 3.0


def test_get_bool_extremes():
    rng = MapRNG(seed=3)
    assert not any(rng.get_bool(0.0) for _ in range(50))
    assert all(rng.get_bool(1.0) for _ in range(50))
    with pytest.raises(ValueError):
        rng.get_bool(1.5)


def test_choice_and_index():
    rng = MapRNG(seed=4)
    items = ["a", "b", "c"]
    for _ in range(20):
        assert rng.choice(items) in items
    with pytest.raises(ValueError):
        rng.get_index([])


def test_shuffle_keeps_elements():
    rng = MapRNG(seed=5)
    items = list(range(30))
    rng.shuffle(items)
    assert sorted(items) == list(range(30))


def test_state_round_trip(tmp_path):
    rng = MapRNG(seed=6)
    rng.get_float()
    path = tmp_path / "rng.json"
    rng.save_state_to_file(str(path))
    expected = [rng.get_int(0, 1000) for _ in range(5)]

    restored = MapRNG(seed=99)
    restored.load_state_from_file(str(path))
    assert restored.initial_seed == 6
    assert [restored.get_int(0, 1000) for _ in range(5)] == expected


def test_metrics_count_draws():
    rng = MapRNG(seed=7, metrics=True)
    rng.get_int(0, 3)
    rng.get_float()
    rng.get_bool()
    rng.shuffle([1, 2, 3])
    metrics = rng.get_metrics()
    assert metrics == {
        "integers_generated": 1,
        "floats_generated": 1,
        "booleans_generated": 1,
        "shuffles": 1,
    }
    rng.reset(seed=7)
    assert rng.get_metrics()["integers_generated"] == 0


def test_metrics_disabled_by_default():
    assert MapRNG(seed=8).get_metrics() is None


def test_ensure_rng():
    rng = MapRNG(seed=9)
    assert ensure_rng(rng) is rng
    assert ensure_rng(None, seed=10).initial_seed == 10
    with pytest.raises(TypeError):
        ensure_rng(object())

"""Tests for visual-effect spawners."""
from idleprogress.spawner import EffectPool, NullSpawner


def test_null_spawner():
    spawner = NullSpawner()
    assert spawner.spawn((0.0, 0.0), "x") is None
    spawner.release(None)


def test_pool_prewarm_and_reuse():
    pool = EffectPool(prewarm=2, can_expand=False)
    assert pool.free_count == 2
    assert pool.created_count == 2

    a = pool.spawn((1.0, 2.0), "a")
    b = pool.spawn((3.0, 4.0), "b")
    assert a.active and b.active
    assert a.position == (1.0, 2.0)
    assert pool.spawn((0.0, 0.0), "c") is None
    assert pool.active_count == 2

    pool.release(a)
    assert not a.active
    assert a.payload is None
    c = pool.spawn((5.0, 6.0), "c")
    assert c is a
    assert pool.created_count == 2


def test_pool_expands_on_demand():
    pool = EffectPool(prewarm=0)
    handles = [pool.spawn((0.0, 0.0), i) for i in range(3)]
    assert all(h is not None for h in handles)
    assert pool.created_count == 3
    assert [h.index for h in handles] == [0, 1, 2]


def test_release_is_idempotent():
    pool = EffectPool(prewarm=1, can_expand=False)
    handle = pool.spawn((0.0, 0.0), None)
    pool.release(handle)
    pool.release(handle)
    pool.release(None)
    assert pool.free_count == 1
    assert pool.spawn((0.0, 0.0), None) is handle
    assert pool.spawn((0.0, 0.0), None) is None

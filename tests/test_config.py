import pytest

from cgraph import config as cfg
from cgraph.config import ThreadPoolConfig


def test_defaults_follow_module_constants():
    config = ThreadPoolConfig()
    assert config.default_thread_size == cfg.DEFAULT_THREAD_SIZE == 8
    assert config.secondary_thread_size == cfg.SECONDARY_THREAD_SIZE == 0
    assert config.max_thread_size == cfg.MAX_THREAD_SIZE
    assert config.max_local_batch_size == cfg.MAX_LOCAL_BATCH_SIZE
    assert config.max_pool_batch_size == cfg.MAX_POOL_BATCH_SIZE
    assert config.max_steal_batch_size == cfg.MAX_STEAL_BATCH_SIZE
    assert config.secondary_thread_ttl == cfg.SECONDARY_THREAD_TTL
    assert config.monitor_span == cfg.MONITOR_SPAN
    assert config.monitor_enable is True
    assert config.fair_lock_enable is False
    assert config.batch_task_enable is False


def test_default_max_thread_size_is_twice_default_plus_one():
    config = ThreadPoolConfig()
    assert config.max_thread_size == config.default_thread_size * 2 + 1


def test_steal_range_limited_by_thread_count():
    config = ThreadPoolConfig(default_thread_size=2, max_task_steal_range=5)
    assert config.steal_range() == config.default_thread_size - 1


def test_steal_range_limited_by_configured_range():
    config = ThreadPoolConfig(default_thread_size=10, max_task_steal_range=3)
    assert config.steal_range() == config.max_task_steal_range


def test_steal_range_never_exceeds_either_bound():
    for threads in range(1, 6):
        for steal in range(0, 6):
            config = ThreadPoolConfig(default_thread_size=threads, max_task_steal_range=steal)
            result = config.steal_range()
            assert result <= steal
            assert result <= threads - 1


@pytest.mark.parametrize(
    "batch, fair, expected",
    [
        (True, False, True),
        (True, True, False),
        (False, False, False),
        (False, True, False),
    ],
)
def test_batch_task_enabled(batch, fair, expected):
    config = ThreadPoolConfig(batch_task_enable=batch, fair_lock_enable=fair)
    assert config.batch_task_enabled() is expected


def test_default_config_does_not_batch():
    assert ThreadPoolConfig().batch_task_enabled() is False
import threading
import time

import pytest

from yapcsg import tasks
from yapcsg.tasks import TaskPool, completed, default_pool


@pytest.fixture
def pool():
    with TaskPool(max_workers=4) as p:
        yield p


def test_completed():
    f = completed(42)
    assert f.done()
    assert f.result() == 42


def test_after_orders_dependencies(pool):
    order = []
    lock = threading.Lock()

    def step(name, delay=0.0):
        def run(*args):
            time.sleep(delay)
            with lock:
                order.append(name)
            return name
        return run

    a = pool.submit(step('a', 0.05))
    b = pool.submit(step('b'))
    c = pool.after(lambda x, y: x + y, a, b)
    assert c.result(timeout=5) == 'ab'
    assert set(order) == {'a', 'b'}


def test_after_without_dependencies(pool):
    assert pool.after(lambda: 7).result(timeout=5) == 7


def test_after_chain_on_single_worker():
    # a long dependency chain must not deadlock a one-thread pool
    with TaskPool(max_workers=1) as p:
        f = completed(0)
        for _ in range(50):
            f = p.after(lambda x: x + 1, f)
        assert f.result(timeout=5) == 50


def test_failure_propagates(pool):
    called = []

    def boom():
        raise ValueError('bad input')

    failed = pool.submit(boom)
    dependent = pool.after(lambda x: called.append(x), failed, completed(1))
    with pytest.raises(ValueError, match='bad input'):
        dependent.result(timeout=5)
    assert called == []


def test_failure_in_task(pool):
    def boom(x):
        raise RuntimeError('task failed')

    f = pool.after(boom, completed(1))
    with pytest.raises(RuntimeError, match='task failed'):
        f.result(timeout=5)


def test_map_preserves_order(pool):
    assert pool.map(lambda x: x * x, range(20)) == [x * x for x in range(20)]


def test_after_on_shut_down_pool():
    p = TaskPool(max_workers=1)
    p.shutdown()
    with pytest.raises(RuntimeError):
        p.after(lambda x: x, completed(1)).result(timeout=5)


def test_executor_argument():
    with pytest.raises(ValueError):
        TaskPool(max_workers=2, executor=object())


class TestDefaultPool:

    def test_shared(self, monkeypatch):
        monkeypatch.setattr(tasks, '_default_pool', None)
        monkeypatch.delenv(tasks.WORKERS_ENV, raising=False)
        assert default_pool() is default_pool()

    def test_env_size(self, monkeypatch):
        monkeypatch.setattr(tasks, '_default_pool', None)
        monkeypatch.setenv(tasks.WORKERS_ENV, '3')
        assert default_pool()._executor._max_workers == 3

    @pytest.mark.parametrize('value', ['zero', '0', '-2'])
    def test_bad_env(self, monkeypatch, value):
        monkeypatch.setattr(tasks, '_default_pool', None)
        monkeypatch.setenv(tasks.WORKERS_ENV, value)
        with pytest.raises(ValueError):
            default_pool()

"""Tests for ManualScheduler, AsyncioScheduler and the process default."""

import asyncio

import pytest

from reactivemodel import (
    AsyncioScheduler,
    InvalidArgument,
    ManualScheduler,
    Model,
    Scheduler,
    SchedulerError,
    get_scheduler,
    set_scheduler,
)


@pytest.fixture
def restore_default():
    previous = get_scheduler()
    yield
    set_scheduler(previous)


class TestManualScheduler:
    def test_nothing_runs_until_flushed(self):
        s = ManualScheduler()
        log = []
        s.schedule_once(lambda: log.append(1))
        assert log == []
        assert s.pending == 1
        assert s.flush() == 1
        assert log == [1]
        assert s.pending == 0

    def test_run_pending_is_one_turn(self):
        s = ManualScheduler()
        log = []

        def first():
            log.append("first")
            s.schedule_once(lambda: log.append("second"))

        s.schedule_once(first)
        assert s.run_pending() == 1
        assert log == ["first"]
        assert s.run_pending() == 1
        assert log == ["first", "second"]

    def test_flush_runs_nested_turns(self):
        s = ManualScheduler()
        log = []
        s.schedule_once(lambda: s.schedule_once(lambda: log.append("nested")))
        assert s.flush() == 2
        assert log == ["nested"]

    def test_error_leaves_rest_queued(self):
        s = ManualScheduler()
        log = []

        def boom():
            raise ValueError("boom")

        s.schedule_once(boom)
        s.schedule_once(lambda: log.append("after"))
        with pytest.raises(ValueError):
            s.flush()
        assert s.pending == 1
        s.flush()
        assert log == ["after"]

    def test_is_a_scheduler(self):
        assert isinstance(ManualScheduler(), Scheduler)
        assert isinstance(AsyncioScheduler(), Scheduler)


class TestAsyncioScheduler:
    def test_defers_to_next_loop_iteration(self):
        log = []

        async def main():
            s = AsyncioScheduler()
            s.schedule_once(lambda: log.append("deferred"))
            log.append("sync")
            await asyncio.sleep(0)

        asyncio.run(main())
        assert log == ["sync", "deferred"]

    def test_explicit_loop(self):
        loop = asyncio.new_event_loop()
        try:
            log = []
            s = AsyncioScheduler(loop)
            s.schedule_once(lambda: log.append(1))
            loop.run_until_complete(asyncio.sleep(0))
            assert log == [1]
        finally:
            loop.close()

    def test_no_running_loop(self):
        with pytest.raises(SchedulerError):
            AsyncioScheduler().schedule_once(lambda: None)

    def test_model_coalesces_on_event_loop(self):
        calls = []

        async def main():
            m = Model(scheduler=AsyncioScheduler())
            m.when(["a", "b"], lambda a, b: calls.append((a, b)))
            m.set("a", 1)
            m.set("b", 2)
            assert calls == []
            await asyncio.sleep(0)

        asyncio.run(main())
        assert calls == [(1, 2)]


class TestDefault:
    def test_default_is_asyncio(self):
        assert isinstance(get_scheduler(), AsyncioScheduler)
        assert Model().scheduler is get_scheduler()

    def test_set_scheduler(self, restore_default):
        s = ManualScheduler()
        set_scheduler(s)
        m = Model(initial={"a": 1})
        calls = []
        m.when("a", lambda a: calls.append(a))
        assert m.scheduler is s
        s.flush()
        assert calls == [1]

    def test_instance_overrides_default(self, restore_default):
        set_scheduler(ManualScheduler())
        own = ManualScheduler()
        assert Model(scheduler=own).scheduler is own

    def test_rejects_non_scheduler(self, restore_default):
        with pytest.raises(InvalidArgument):
            set_scheduler(object())

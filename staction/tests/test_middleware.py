"""
Tests for the middleware chain.

Tests:
- Configuration (partitioning, wholesale replacement, validation)
- Abstention re-commits the current state
- Ordering and error containment across phases
"""

import pytest

from ..engine_core.middleware import MiddlewareEntry, MiddlewarePhase
from ..errors import MiddlewareConfigError
from .conftest import sleep


def _noop(params):
    return None


class TestSetMiddleware:
    """Tests for set_middleware."""

    def test_partitions_by_phase(self, engine):
        first = MiddlewareEntry(phase="pre", method=_noop, meta={"id": 1})
        second = MiddlewareEntry(phase="post", method=_noop, meta={"id": 2})
        third = MiddlewareEntry(phase="pre", method=_noop, meta={"id": 3})

        engine.set_middleware([first, second, third])

        assert engine.middleware.pre == (first, third)
        assert engine.middleware.post == (second,)

    def test_accepts_mappings(self, engine):
        engine.set_middleware([
            {"phase": "pre", "method": _noop},
            {"phase": MiddlewarePhase.POST, "method": _noop, "meta": "audit"},
        ])

        assert len(engine.middleware.pre) == 1
        assert engine.middleware.post[0].meta == "audit"

    def test_replaces_wholesale(self, engine):
        engine.set_middleware([{"phase": "pre", "method": _noop}] * 3)
        engine.set_middleware([{"phase": "post", "method": _noop}])

        assert engine.middleware.pre == ()
        assert len(engine.middleware.post) == 1

    def test_invalid_entries_rejected(self, engine):
        """Bad entries raise and leave the previous configuration."""
        engine.set_middleware([{"phase": "pre", "method": _noop}])

        with pytest.raises(MiddlewareConfigError) as exc_info:
            engine.set_middleware([
                {"phase": "during", "method": _noop},
                {"phase": "post", "method": "not callable"},
            ])

        errors = exc_info.value.errors
        assert len(errors) == 2
        assert errors[0].startswith("middleware[0].phase")
        assert errors[1].startswith("middleware[1].method")
        assert len(engine.middleware.pre) == 1

    def test_entries_are_frozen(self):
        entry = MiddlewareEntry(phase="pre", method=_noop)
        with pytest.raises(Exception):
            entry.meta = "changed"


class TestMiddlewareRun:
    """Tests for middleware around a dispatch."""

    @pytest.mark.asyncio
    async def test_params_passed_to_method(self, engine, counter_actions):
        seen = []

        def spy(params):
            seen.append((params.name, params.args, params.kwargs, params.meta, params.state()))

        await engine.init(counter_actions, lambda actions: {"count": 0}, lambda s, a: None)
        engine.set_middleware([{"phase": "pre", "method": spy, "meta": "m"}])

        await engine.actions.inc(by=2)

        assert seen == [("inc", (), {"by": 2}, "m", {"count": 0})]

    @pytest.mark.asyncio
    async def test_both_phases_see_call_arguments(self, engine, counter_actions):
        """Pre and post middleware see the arguments the action was called with."""
        seen = []

        def spy(params):
            seen.append((params.meta, params.name, params.args, params.kwargs))

        await engine.init(counter_actions, lambda actions: {"count": 0}, lambda s, a: None)
        engine.set_middleware([
            {"phase": "pre", "method": spy, "meta": "pre"},
            {"phase": "post", "method": spy, "meta": "post"},
        ])

        result = await engine.actions.inc(3)

        assert result.state == {"count": 3}
        assert seen == [
            ("pre", "inc", (3,), {}),
            ("post", "inc", (3,), {}),
        ]

    @pytest.mark.asyncio
    async def test_abstention_keeps_state(self, engine, counter_actions, recorder):
        """Middleware returning None re-commits the state unchanged."""
        await engine.init(counter_actions, lambda actions: {"count": 4}, recorder)
        engine.set_middleware([{"phase": "pre", "method": _noop}])

        result = await engine.actions.inc()

        # one commit for the abstaining middleware, one for the action
        assert recorder.states == [{"count": 4}, {"count": 5}]
        assert result.state == {"count": 5}

    @pytest.mark.asyncio
    async def test_middleware_can_produce_state(self, engine, counter_actions, recorder):
        async def double_after(params):
            await sleep()
            return {"count": params.state()["count"] * 2}

        await engine.init(counter_actions, lambda actions: {"count": 1}, recorder)
        engine.set_middleware([{"phase": "post", "method": double_after}])

        result = await engine.actions.inc()

        assert result.state == {"count": 4}
        assert recorder.states == [{"count": 2}, {"count": 4}]

    @pytest.mark.asyncio
    async def test_generator_middleware(self, engine, counter_actions, recorder):
        def stamp(params):
            yield {**params.state(), "stage": "before"}
            yield lambda state: {**state, "stage": "ready"}

        await engine.init(counter_actions, lambda actions: {"count": 0}, recorder)
        engine.set_middleware([{"phase": "pre", "method": stamp}])

        await engine.actions.inc()

        assert recorder.count == 3
        assert recorder.states[1] == {"count": 0, "stage": "ready"}

    @pytest.mark.asyncio
    async def test_phase_order(self, engine):
        order = []

        def mark(label):
            def method(params):
                order.append(label)
            return method

        def body(ctx):
            order.append("body")

        await engine.init({"act": body}, lambda actions: {}, lambda s, a: None)
        engine.set_middleware([
            {"phase": "post", "method": mark("post-1")},
            {"phase": "pre", "method": mark("pre-1")},
            {"phase": "pre", "method": mark("pre-2")},
            {"phase": "post", "method": mark("post-2")},
        ])

        await engine.actions.act()

        assert order == ["pre-1", "pre-2", "body", "post-1", "post-2"]

    @pytest.mark.asyncio
    async def test_running_phase_ignores_reconfiguration(self, engine):
        """Replacing middleware mid-phase does not affect that phase."""
        order = []

        def reconfigure(params):
            order.append("first")
            engine.set_middleware([])

        def second(params):
            order.append("second")

        await engine.init({"act": lambda ctx: None}, lambda actions: {}, lambda s, a: None)
        engine.set_middleware([
            {"phase": "pre", "method": reconfigure},
            {"phase": "pre", "method": second},
        ])

        await engine.actions.act()
        await engine.actions.act()

        assert order == ["first", "second"]


class TestErrorContainment:
    """Tests for failures inside middleware phases."""

    @pytest.mark.asyncio
    async def test_pre_failure_stops_everything_after(self, engine, recorder):
        ran = []

        def first(params):
            return {"count": 10}

        def second(params):
            raise RuntimeError("pre failed")

        def third(params):
            ran.append("third")

        def post(params):
            ran.append("post")

        def body(ctx):
            ran.append("body")
            return {"count": 99}

        await engine.init({"act": body}, lambda actions: {"count": 0}, recorder)
        engine.set_middleware([
            {"phase": "pre", "method": first},
            {"phase": "pre", "method": second},
            {"phase": "pre", "method": third},
            {"phase": "post", "method": post},
        ])

        with pytest.raises(RuntimeError, match="pre failed"):
            await engine.actions.act()

        assert ran == []
        assert engine.get_state() == {"count": 10}
        assert recorder.states == [{"count": 10}]

    @pytest.mark.asyncio
    async def test_body_failure_skips_post(self, engine, recorder):
        ran = []

        def body(ctx):
            raise ValueError("body failed")

        await engine.init({"act": body}, lambda actions: {"count": 0}, recorder)
        engine.set_middleware([
            {"phase": "pre", "method": lambda params: {"count": 1}},
            {"phase": "post", "method": lambda params: ran.append("post")},
        ])

        with pytest.raises(ValueError, match="body failed"):
            await engine.actions.act()

        assert ran == []
        assert engine.get_state() == {"count": 1}

    @pytest.mark.asyncio
    async def test_post_failure_keeps_earlier_commits(self, engine, counter_actions):
        ran = []

        def failing(params):
            raise RuntimeError("post failed")

        await engine.init(counter_actions, lambda actions: {"count": 0}, lambda s, a: None)
        engine.set_middleware([
            {"phase": "post", "method": lambda params: {"count": params.state()["count"] + 100}},
            {"phase": "post", "method": failing},
            {"phase": "post", "method": lambda params: ran.append("late")},
        ])

        with pytest.raises(RuntimeError, match="post failed"):
            await engine.actions.inc()

        assert ran == []
        assert engine.get_state() == {"count": 101}

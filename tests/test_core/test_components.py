import pytest
from unittest.mock import patch

from src.algorithms import RoundRobin
from src.core import (
    Balancer, Processor, Sink, Source, Throttle, UnresolvedReferenceError
)
from src.environment import Constant


def wire(generator, component):
    generator.next = component
    return generator


@pytest.fixture
def sink():
    return Sink("exit")


@pytest.fixture
def pipeline(sink):
    """Source with period 1 feeding a processor with service time 2"""
    processor = Processor("server", [wire(Constant(2.0), sink)])
    source = Source("arrivals", wire(Constant(1.0), processor))
    return source, processor, sink


@pytest.fixture
def throttled(sink):
    """Source with period 1 feeding a throttle with cooldown 1.3"""
    throttle = Throttle("gate", [wire(Constant(1.3), sink)])
    source = Source("arrivals", wire(Constant(1.0), throttle))
    return source, throttle, sink


def drive(source, count):
    """Generate events and move each one through a single station"""
    events = []
    for _ in range(count):
        event = source.simulate(None)
        event.simulate()
        events.append(event)
    return events


class TestSource:
    def test_generates_cumulative_arrivals(self, pipeline):
        """Test that arrivals follow the source's running clock"""
        source, processor, _ = pipeline
        events = [source.simulate(None) for _ in range(3)]

        assert [e.created for e in events] == [1.0, 2.0, 3.0]
        assert [e.label for e in events] == ["0", "1", "2"]
        assert all(e.arrived == e.started == e.completed == e.created for e in events)
        assert all(e.component is processor for e in events)
        assert all(e.source == "arrivals" for e in events)
        assert len(source.log) == 3

    def test_returns_copy_of_logged_event(self, pipeline):
        """Test that the network sees a copy of what the source logged"""
        source, _, _ = pipeline
        event = source.simulate(None)
        assert event is not source.log[-1]
        assert source.log[-1].component is None

    def test_accepts_injected_event(self, pipeline):
        """Test that an externally supplied event is logged verbatim"""
        source, processor, _ = pipeline
        upstream = Source("upstream", Constant(5.0)).simulate(None)
        forwarded = source.simulate(upstream)

        assert source.log[-1].source == "upstream"
        assert forwarded.created == 5.0
        assert forwarded.component is processor
        assert source.time == 0.0

    def test_reset_rewinds_clock(self, pipeline):
        """Test that reset rewinds the clock and counter"""
        source, _, _ = pipeline
        drive(source, 2)
        source.reset()

        assert source.time == 0.0
        assert source.counter == 0
        assert source.log == []
        assert source.simulate(None).created == 1.0


class TestProcessor:
    def test_constant_service_completions(self, pipeline):
        """Test FIFO completions for period 1 arrivals and service time 2"""
        source, processor, sink = pipeline
        events = drive(source, 4)

        assert [e.completed for e in events] == pytest.approx([3.0, 5.0, 7.0, 9.0])
        for event in events:
            assert event.executed == pytest.approx(2.0)
            assert event.elapsed == pytest.approx(event.completed - event.arrived)
            assert event.component is sink

    def test_availability_is_non_decreasing(self, pipeline):
        """Test that the processor's availability only moves forward"""
        source, processor, _ = pipeline
        seen = []
        for _ in range(6):
            event = source.simulate(None)
            event.simulate()
            seen.append(processor.get_available())
        assert seen == sorted(seen)

    def test_waiting_is_not_executed_time(self, pipeline):
        """Test that queueing delay counts as elapsed but not executed"""
        source, _, _ = pipeline
        events = drive(source, 3)
        # Third event arrives at 3, starts at 5
        assert events[2].started == pytest.approx(5.0)
        assert events[2].elapsed == pytest.approx(4.0)
        assert events[2].executed == pytest.approx(2.0)

    def test_queue_depth_samples(self, pipeline):
        """Test the number of earlier events still in service at each arrival"""
        source, processor, _ = pipeline
        drive(source, 4)
        assert processor.depths == [0, 1, 1, 2]

    def test_log_holds_detached_snapshots(self, pipeline):
        """Test that the processor logs snapshots without a next station"""
        source, processor, _ = pipeline
        events = drive(source, 2)
        assert len(processor.log) == 2
        assert all(entry.component is None for entry in processor.log)
        assert processor.log[1] is not events[1]

    def test_absent_event_is_not_forwarded(self, pipeline):
        """Test that simulating nothing produces nothing"""
        _, processor, sink = pipeline
        assert processor.simulate(None) is None
        assert processor.log == []
        assert sink.log == []

    def test_per_source_generators(self, sink):
        """Test that the generator is chosen by source with a default fallback"""
        vip = wire(Constant(0.5, source="vip"), sink)
        fallback = wire(Constant(3.0), sink)
        processor = Processor("server", [vip, fallback])

        assert processor.generator_for("vip") is vip
        assert processor.generator_for("anyone") is fallback

    def test_missing_generator_raises(self, sink):
        """Test that an event with no matching function is reported"""
        processor = Processor("server", [wire(Constant(1.0, source="vip"), sink)])
        with pytest.raises(UnresolvedReferenceError):
            processor.generator_for("anyone")


class TestThrottle:
    def test_cooldown_spacing(self, throttled):
        """Test that starts are spaced by the cooldown while arrivals are not"""
        source, throttle, _ = throttled
        events = drive(source, 4)

        assert [e.arrived for e in events] == pytest.approx([1.0, 2.0, 3.0, 4.0])
        assert [e.started for e in events] == pytest.approx([1.0, 2.3, 3.6, 4.9])
        assert [e.completed for e in events] == pytest.approx([1.0, 2.3, 3.6, 4.9])
        assert all(e.executed == 0.0 for e in events)
        assert throttle.get_available() == pytest.approx(6.2)

    def test_throttle_is_not_active(self, throttled):
        """Test that throttling keeps lookahead state"""
        _, throttle, _ = throttled
        assert not throttle.active
        assert Processor.active

    def test_depth_counts_events_still_in_flight(self, sink):
        """Test depth samples when events arrive faster than the gate opens"""
        throttle = Throttle("gate", [wire(Constant(3.0), sink)])
        source = Source("arrivals", wire(Constant(1.0), throttle))
        drive(source, 4)
        # Starts at 1, 4, 7, 10 for arrivals at 1, 2, 3, 4
        assert throttle.depths == [0, 0, 1, 1]


class TestSink:
    def test_sink_terminates_event(self, pipeline):
        """Test that reaching the sink removes the event from the network"""
        source, _, sink = pipeline
        event = source.simulate(None)
        event.simulate()
        event.simulate()

        assert event.terminal
        assert sink.log[-1] is event
        assert sink.get_available() == pytest.approx(3.0)


class TestBalancer:
    @pytest.fixture
    def balanced(self, sink):
        left = Processor("left", [wire(Constant(1.0), sink)])
        right = Processor("right", [wire(Constant(1.0), sink)])
        distributor = RoundRobin(["left", "right"])
        distributor.add_next(left)
        distributor.add_next(right)
        balancer = Balancer("front", distributor)
        source = Source("arrivals", wire(Constant(1.0), balancer))
        return source, balancer, left, right

    def test_zero_delay_pass_through(self, balanced):
        """Test that balancing adds no time and records a zero depth"""
        source, balancer, left, _ = balanced
        event = source.simulate(None)
        event.simulate()

        assert event.completed == 1.0
        assert event.component is left
        assert balancer.depths == [0]
        assert balancer.log[0].component is None

    def test_routes_through_distributor(self, balanced):
        """Test that successive events alternate between targets"""
        source, _, left, right = balanced
        events = drive(source, 4)
        assert [e.component for e in events] == [left, right, left, right]

    def test_availability_previews_target(self, balanced):
        """Test that availability comes from the distributor's choice"""
        source, balancer, left, _ = balanced
        left.available = 7.0
        assert balancer.get_available() == 7.0

    def test_unwired_balancer_is_reported(self):
        """Test that missing distributor slots are listed"""
        balancer = Balancer("front", RoundRobin(["left", "right"]))
        assert len(balancer.unresolved()) == 2
        assert Balancer("bare").unresolved() == ["bare: no distributor"]


class TestReset:
    def test_diamond_reset_visits_shared_station_once(self, sink):
        """Test that a station reachable through two balancers is reset once"""
        shared = Processor("shared", [wire(Constant(1.0), sink)])

        upper = RoundRobin(["shared"])
        upper.add_next(shared)
        lower = RoundRobin(["shared"])
        lower.add_next(shared)
        first = Balancer("upper", upper)
        second = Balancer("lower", lower)

        root = RoundRobin(["upper", "lower"])
        root.add_next(first)
        root.add_next(second)
        front = Balancer("front", root)
        source = Source("arrivals", wire(Constant(1.0), front))

        drive_all = [source.simulate(None) for _ in range(4)]
        for event in drive_all:
            while not event.terminal:
                event.simulate()
        assert shared.available > 0

        with patch.object(shared, '_clear', wraps=shared._clear) as cleared, \
                patch.object(sink, '_clear', wraps=sink._clear) as sink_cleared:
            source.reset()

        assert cleared.call_count == 1
        assert sink_cleared.call_count == 1
        assert shared.available == 0.0
        assert shared.log == []
        assert shared.depths == []
        assert sink.log == []
        assert root.index == 0

    def test_reset_repeated_runs_are_identical(self, pipeline):
        """Test that a constant network replays identically after reset"""
        source, processor, _ = pipeline
        first = [(e.created, e.completed) for e in drive(source, 5)]
        source.reset()
        second = [(e.created, e.completed) for e in drive(source, 5)]
        assert first == second

import asyncio

from vibe_rank.axis import AxisResolver, order_axis
from vibe_rank.concepts import StaticOpposites
from vibe_rank.config import Candidate
from vibe_rank.pipeline_types import Axis, AxisPhase, Polarity
from vibe_rank.retrieval import ServiceError


def _c(item_id, score):
    return Candidate(id=item_id, score=score)


def _ranked(prefix, n):
    return [_c(f"{prefix}{i}", 1.0 - i * 0.01) for i in range(n)]


class FakeRetrieval:
    """Returns canned results per query; optionally fails for some queries."""

    def __init__(self, results, failing=()):
        self.results = results
        self.failing = set(failing)
        self.calls = []

    async def search_all(self, query, category="all"):
        self.calls.append((query, category))
        if query in self.failing:
            raise ServiceError(f"boom for {query}")
        return list(self.results.get(query, []))


class FakeConcepts:
    def __init__(self, table, failing=False):
        self.table = table
        self.failing = failing

    async def lookup_opposites(self, concept):
        if self.failing:
            raise ServiceError("concept service down")
        return list(self.table.get(concept, []))


def test_concept_only_at_full_position():
    axis = Axis(axis_id="a1", concept_label="warm", position=1.0,
                concept_candidates=[_c("A", 0.9), _c("B", 0.5)])
    assert [c.id for c in order_axis(axis)] == ["A", "B"]


def test_opposite_side_uses_opposite_candidates():
    axis = Axis(axis_id="a1", concept_label="warm", opposite_label="cool", position=0.0,
                concept_candidates=[_c("A", 0.9), _c("B", 0.5)],
                opposite_candidates=[_c("C", 0.8)])
    assert [c.id for c in order_axis(axis)] == ["C"]


def test_missing_opposite_rotates_concept_tiers():
    concept = _ranked("k", 100)
    axis = Axis(axis_id="a1", concept_label="warm", position=0.45, concept_candidates=concept)
    # stop 5 on the opposite side -> concept tiers rotated by four
    out = order_axis(axis)
    assert out[0].id == "k40"
    assert len(out) == 100


def test_empty_everything_gives_empty_ordering():
    axis = Axis(axis_id="a1", concept_label="warm", position=0.2)
    assert order_axis(axis) == []


def test_order_axis_depends_only_on_current_state():
    concept = _ranked("k", 30)
    axis = Axis(axis_id="a1", concept_label="warm", position=0.2, concept_candidates=concept)
    order_axis(axis)
    axis.position = 0.9
    moved = [c.id for c in order_axis(axis)]

    fresh = Axis(axis_id="a2", concept_label="warm", position=0.9, concept_candidates=concept)
    assert moved == [c.id for c in order_axis(fresh)]


def test_single_pole_axis_ignores_left_half():
    concept = _ranked("k", 20)
    axis = Axis(axis_id="a1", concept_label="saas", position=0.5,
                polarity=Polarity.SINGLE, concept_candidates=concept)
    # stop 1 on the concept side -> last tier first
    assert order_axis(axis)[0].id == "k18"


def _dual_position(stop):
    return (stop - 1) / 10 + 0.05


def _single_position(stop):
    return 0.5 + _dual_position(stop) / 2


def _ids_at(axis, position):
    axis.position = position
    return [c.id for c in order_axis(axis)]


def test_fallback_stops_move_a_single_tier():
    axis = Axis(axis_id="a1", concept_label="warm", concept_candidates=_ranked("k", 100))
    for stop in range(1, 5):
        a = _ids_at(axis, _dual_position(stop))
        b = _ids_at(axis, _dual_position(stop + 1))
        assert b == a[10:] + a[:10]
    # crossing the midpoint over the same concept tiers changes nothing
    assert _ids_at(axis, _dual_position(5)) == _ids_at(axis, _dual_position(6))


def test_single_pole_stops_move_a_single_tier():
    axis = Axis(axis_id="a1", concept_label="saas", polarity=Polarity.SINGLE,
                concept_candidates=_ranked("k", 100))
    assert _ids_at(axis, _single_position(1))[0] == "k90"
    assert _ids_at(axis, _single_position(10))[0] == "k0"
    for stop in range(1, 10):
        a = _ids_at(axis, _single_position(stop))
        b = _ids_at(axis, _single_position(stop + 1))
        assert b == a[-10:] + a[:-10]


def test_resolver_loads_both_sides():
    retrieval = FakeRetrieval({"warm": [_c("A", 0.9), _c("B", 0.5)], "cool": [_c("C", 0.8)]})
    concepts = FakeConcepts({"warm": ["cool", "aloof"]})
    changes = []
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="warm"), retrieval, concepts,
                            on_change=changes.append)

    asyncio.run(resolver.load("website"))

    assert resolver.phase == AxisPhase.READY
    assert resolver.axis.opposite_label == "cool"
    assert [c.id for c in resolver.axis.opposite_candidates] == ["C"]
    assert ("warm", "website") in retrieval.calls
    assert ("cool", "website") in retrieval.calls
    assert changes and set(changes) == {"a1"}

    resolver.set_position(0.0)
    assert [c.id for c in resolver.ordering()] == ["C"]


def test_resolver_without_opposite_goes_single_pole():
    retrieval = FakeRetrieval({"saas": _ranked("s", 5)})
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="saas", position=0.1),
                            retrieval, FakeConcepts({}))

    asyncio.run(resolver.load())

    assert resolver.axis.polarity == Polarity.SINGLE
    assert resolver.axis.position == 0.5
    assert resolver.set_position(0.2) == 0.5
    assert [q for q, _ in retrieval.calls] == ["saas"]


def test_resolver_degrades_on_upstream_failures():
    retrieval = FakeRetrieval({"warm": [_c("A", 0.9)]}, failing={"cool"})
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="warm", position=0.0),
                            retrieval, FakeConcepts({"warm": ["cool"]}))

    asyncio.run(resolver.load())

    assert resolver.phase == AxisPhase.READY
    assert resolver.axis.opposite_candidates == []
    # falls back to concept items rather than nothing
    assert [c.id for c in resolver.ordering()] == ["A"]


def test_resolver_keeps_data_when_concept_service_fails():
    retrieval = FakeRetrieval({"warm": [_c("A", 0.9)]}, failing={"warm"})
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="warm"),
                            retrieval, FakeConcepts({}, failing=True))
    resolver.axis.concept_candidates = [_c("OLD", 0.4)]

    asyncio.run(resolver.load())

    assert [c.id for c in resolver.axis.concept_candidates] == ["OLD"]
    assert resolver.axis.polarity == Polarity.DUAL


def test_destroyed_axis_drops_late_results():
    class SlowRetrieval(FakeRetrieval):
        async def search_all(self, query, category="all"):
            await asyncio.sleep(0.01)
            return await super().search_all(query, category)

    retrieval = SlowRetrieval({"warm": [_c("A", 0.9)]})
    changes = []
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="warm"), retrieval,
                            FakeConcepts({}), on_change=changes.append)

    async def scenario():
        task = asyncio.create_task(resolver.load())
        await asyncio.sleep(0)
        resolver.destroy()
        await task

    asyncio.run(scenario())

    assert resolver.phase == AxisPhase.DESTROYED
    assert resolver.axis.concept_candidates == []


def test_static_opposites_pass_through_fetching_opposite():
    class DelayedRetrieval(FakeRetrieval):
        delays = {"warm": 0.01, "cool": 0.05}

        async def search_all(self, query, category="all"):
            await asyncio.sleep(self.delays.get(query, 0))
            return await super().search_all(query, category)

    retrieval = DelayedRetrieval({"warm": [_c("A", 0.9)], "cool": [_c("C", 0.8)]})
    phases = []
    resolver = AxisResolver(Axis(axis_id="a1", concept_label="warm"), retrieval,
                            StaticOpposites({"warm": ["cool"]}),
                            on_change=lambda _: phases.append(resolver.phase))

    asyncio.run(resolver.load())

    assert phases[0] == AxisPhase.FETCHING_OPPOSITE
    assert phases[-1] == AxisPhase.READY
    assert AxisPhase.CONCEPT_READY not in phases

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from importlib import metadata as importlib_metadata
from typing import Any, Callable, ClassVar

import pytest

from bagua.config import PhaseSourceCfg, Settings
from bagua.phases import ChineseMoonPhase, MoonPhase, symbols_for_moment
from bagua.sources import (
    MeanLunationSource,
    PhaseSource,
    PhaseSourceError,
    get_phase_source,
    list_phase_sources,
    load_entry_point_sources,
    register_phase_source,
    resolve_phase_source,
    unregister_phase_source,
)
from bagua.symbols import KUN, QIAN, ZHEN


@dataclass(frozen=True)
class FixedSource:
    source_id: ClassVar[str] = "fixed"

    phase: MoonPhase | ChineseMoonPhase

    def phase_at(self, moment: datetime) -> MoonPhase | ChineseMoonPhase:
        return self.phase


@pytest.fixture
def fixed_source():
    source = FixedSource(ChineseMoonPhase.EMEI)
    register_phase_source("fixed", source, aliases=("pinned",))
    yield source
    unregister_phase_source("fixed")


def test_builtin_source_registered() -> None:
    assert "mean_lunation" in list_phase_sources()
    assert get_phase_source("mean") is get_phase_source("mean_lunation")
    assert isinstance(get_phase_source("mean_lunation"), PhaseSource)


def test_mean_lunation_reference_points() -> None:
    source = MeanLunationSource()
    reference = source.reference_new_moon
    half = timedelta(days=source.synodic_month_days / 2)
    quarter = timedelta(days=source.synodic_month_days / 4)

    assert source.phase_at(reference) is MoonPhase.NEW
    assert source.phase_at(reference + half) is MoonPhase.FULL
    assert source.phase_at(reference + quarter) is MoonPhase.FIRST_QUARTER
    assert source.phase_at(reference - quarter) is MoonPhase.LAST_QUARTER


def test_mean_lunation_treats_naive_as_utc() -> None:
    source = MeanLunationSource()
    aware = datetime(2024, 3, 25, 7, 0, tzinfo=UTC)
    assert source.elongation_at(aware.replace(tzinfo=None)) == pytest.approx(
        source.elongation_at(aware)
    )


def test_mean_lunation_known_full_moon() -> None:
    # Full moon of 2024-03-25 07:00 UTC.
    assert MeanLunationSource().phase_at(datetime(2024, 3, 25, 7, 0, tzinfo=UTC)) is MoonPhase.FULL


def test_duplicate_registration_rejected(fixed_source: FixedSource) -> None:
    with pytest.raises(ValueError):
        register_phase_source("pinned", fixed_source)


def test_unknown_source_raises_structured_error() -> None:
    with pytest.raises(PhaseSourceError) as excinfo:
        get_phase_source("weatherkit")
    assert excinfo.value.source_id == "weatherkit"
    assert excinfo.value.error_code == "PHASE_SOURCE_UNKNOWN"


def test_resolve_uses_settings(fixed_source: FixedSource) -> None:
    settings = Settings(phase_source=PhaseSourceCfg(name="pinned"))
    assert resolve_phase_source(settings) is fixed_source


def test_resolve_builds_tuned_mean_lunation() -> None:
    settings = Settings(phase_source=PhaseSourceCfg(synodic_month_days=30.0))
    source = resolve_phase_source(settings)
    assert isinstance(source, MeanLunationSource)
    assert source.synodic_month_days == 30.0


def test_resolve_alias_keeps_tuning() -> None:
    """The ``mean`` alias honours the configured period and reference."""

    reference = datetime(2024, 1, 11, 11, 57, tzinfo=UTC)
    settings = Settings(
        phase_source=PhaseSourceCfg(
            name="mean", synodic_month_days=30.0, reference_new_moon=reference
        )
    )
    source = resolve_phase_source(settings)
    assert isinstance(source, MeanLunationSource)
    assert source.synodic_month_days == 30.0
    assert source.reference_new_moon == reference
    assert get_phase_source("mean").synodic_month_days == pytest.approx(29.530588853)


def test_unregister_removes_aliases() -> None:
    source = FixedSource(MoonPhase.FULL)
    register_phase_source("transient", source, aliases=("transient_alias",))

    assert unregister_phase_source("transient") is True
    assert "transient" not in list_phase_sources()
    assert "transient_alias" not in list_phase_sources()
    assert unregister_phase_source("transient_alias") is False
    assert "mean" in list_phase_sources()


def test_unregister_by_alias_removes_primary_name() -> None:
    source = FixedSource(MoonPhase.NEW)
    register_phase_source("transient", source, aliases=("transient_alias",))

    assert unregister_phase_source("transient_alias") is True
    assert "transient" not in list_phase_sources()


@dataclass(frozen=True)
class _FakeEntryPoint:
    name: str
    loader: Callable[[], Any]

    def load(self) -> Any:
        return self.loader()


@dataclass(frozen=True)
class EntryPointSource:
    source_id: ClassVar[str] = "entry_point_source"

    phase: MoonPhase = MoonPhase.WANING_CRESCENT

    def phase_at(self, moment: datetime) -> MoonPhase:
        return self.phase


def _raise_import_error() -> Any:
    raise ImportError("missing optional dependency")


@pytest.fixture
def fake_entry_points(monkeypatch):
    def _install(*entries: _FakeEntryPoint) -> None:
        def _entry_points(*, group: str) -> list[_FakeEntryPoint]:
            assert group == "bagua.phase_sources"
            return list(entries)

        monkeypatch.setattr(importlib_metadata, "entry_points", _entry_points)

    yield _install
    unregister_phase_source(EntryPointSource.source_id)
    unregister_phase_source("factory_source")


def test_entry_points_register_valid_sources(fake_entry_points, caplog) -> None:
    fake_entry_points(
        _FakeEntryPoint("broken", _raise_import_error),
        _FakeEntryPoint("bogus", lambda: object()),
        _FakeEntryPoint("as_class", lambda: EntryPointSource),
        _FakeEntryPoint("duplicate", lambda: MeanLunationSource()),
    )

    with caplog.at_level(logging.WARNING, logger="bagua.sources"):
        loaded = load_entry_point_sources()

    assert loaded == ["entry_point_source"]
    source = get_phase_source("entry_point_source")
    assert isinstance(source, EntryPointSource)
    assert source.phase_at(datetime(2020, 1, 1)) is MoonPhase.WANING_CRESCENT

    messages = [record.getMessage() for record in caplog.records]
    assert "failed to load phase source entry point" in messages
    assert "entry point 'bogus' did not return a PhaseSource" in messages
    assert "phase source 'mean_lunation' already registered; skipping entry point" in messages
    load_failure = next(
        r for r in caplog.records if getattr(r, "err_code", None) == "PHASE_SOURCE_ENTRYPOINT_LOAD"
    )
    assert load_failure.entry_point == "broken"
    assert load_failure.exc_info is not None


def test_entry_point_factory_named_by_entry(fake_entry_points) -> None:
    class _Anonymous:
        source_id = ""

        def phase_at(self, moment: datetime) -> MoonPhase:
            return MoonPhase.FULL

    fake_entry_points(_FakeEntryPoint("factory_source", lambda: _Anonymous))

    assert load_entry_point_sources() == ["factory_source"]
    assert get_phase_source("factory_source").phase_at(datetime(2020, 1, 1)) is MoonPhase.FULL


def test_symbols_for_moment_with_named_source(fixed_source: FixedSource) -> None:
    symbols = symbols_for_moment(datetime(2020, 1, 1), source="fixed")
    assert symbols.phase is ChineseMoonPhase.EMEI
    assert symbols.trigram is ZHEN
    assert symbols.hexagram is not None and symbols.hexagram.name == "臨"


def test_symbols_for_moment_with_instance() -> None:
    symbols = symbols_for_moment(datetime(2020, 1, 1), source=FixedSource(MoonPhase.FULL))
    assert symbols.trigram is QIAN


def test_symbols_for_moment_from_settings() -> None:
    reference = MeanLunationSource().reference_new_moon
    symbols = symbols_for_moment(reference, settings=Settings())
    assert symbols.phase is MoonPhase.NEW
    assert symbols.trigram is KUN


def test_symbols_for_moment_loads_settings(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("BAGUA_HOME", str(tmp_path))
    monkeypatch.setenv("BAGUA_PHASE_SOURCE", "mean")
    reference = MeanLunationSource().reference_new_moon
    assert symbols_for_moment(reference).phase is MoonPhase.NEW


def test_symbols_for_moment_propagates_bad_phase() -> None:
    @dataclass(frozen=True)
    class BrokenSource:
        source_id: ClassVar[str] = "broken"

        def phase_at(self, moment: datetime) -> str:
            return "gibbous-ish"

    with pytest.raises(ValueError):
        symbols_for_moment(datetime(2020, 1, 1), source=BrokenSource())  # type: ignore[arg-type]

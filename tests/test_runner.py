import datetime as dt
import threading

from analysis.runner import AnalysisRunner, RunOptions
from tests.conftest import FakeGenerator, FakeStore, make_unit

REPORT_DATE = dt.date(2025, 1, 13)


def _runner(generator, store, sleeps=None, cancel_event=None, **options):
    sleeps = sleeps if sleeps is not None else []
    return AnalysisRunner(
        generator,
        store,
        RunOptions(report_date=REPORT_DATE, **options),
        sleep=sleeps.append,
        cancel_event=cancel_event,
    )


def test_all_units_saved_plus_regional():
    store, sleeps = FakeStore(), []
    units = [make_unit("SBRSPAA01", nps=45.0), make_unit("SBRSPAB02", nps=65.0), make_unit("SBRSPAC03", nps=None)]

    summary = _runner(FakeGenerator(), store, sleeps, source_id="src-1").run(units)

    assert summary.saved == 3
    assert summary.skipped == []
    assert summary.regional_saved
    assert not summary.cancelled
    assert sleeps == [1.0, 1.0]

    unit_reports = [r for r in store.reports if r["summary"]["type"] == "unit"]
    assert [r["summary"]["priority_level"] for r in unit_reports] == ["critica", "alta", "media"]
    assert all(r["source_id"] == "src-1" and r["report_date"] == REPORT_DATE for r in store.reports)

    first = unit_reports[0]["summary"]
    assert first["unit_code"] == "SBRSPAA01"
    assert first["unit_name"] == "Unidade 01"
    assert first["feedback_count"] == 3
    assert first["markdown_report"].startswith("## Relatório")


def test_regional_report_shape():
    store = FakeStore()
    units = [make_unit("SBRSPAA01", nps=80.0, feedback_count=10), make_unit("SBRSPAB02", nps=60.0, feedback_count=5)]

    _runner(FakeGenerator(), store).run(units)

    regional = store.reports[-1]
    assert regional["unit_id"] is None
    assert regional["summary"]["type"] == "regional"
    assert regional["summary"]["total_feedbacks"] == 15
    assert regional["summary"]["avg_nps"] == 70.0
    assert regional["summary"]["overall_sentiment"] == "positivo"


def test_units_below_min_comments_skipped():
    store = FakeStore()
    units = [make_unit("SBRSPAA01", n_comments=2), make_unit("SBRSPAB02", n_comments=3)]

    summary = _runner(FakeGenerator(), store).run(units)

    assert summary.saved == 1
    assert [str(s) for s in summary.skipped] == ["Unidade 01 (2 comentários)"]


def test_generator_failure_is_isolated(caplog):
    store, sleeps = FakeStore(), []
    units = [make_unit("SBRSPAA01"), make_unit("SBRSPBAD1"), make_unit("SBRSPAC03")]

    summary = _runner(FakeGenerator(fail_markers=("SBRSPBAD1",)), store, sleeps).run(units)

    assert summary.saved == 2
    assert summary.skipped_count == 1
    assert summary.skipped[0].name == "Unidade D1"
    assert summary.skipped[0].reason.startswith("erro IA:")
    assert summary.regional_saved
    assert sleeps == [1.0, 1.0]
    assert "Unidade D1" in caplog.text


def test_store_failure_is_isolated():
    units = [make_unit("SBRSPAA01"), make_unit("SBRSPAB02")]
    store = FakeStore(fail_for={"id-SBRSPAA01"})

    summary = _runner(FakeGenerator(), store).run(units)

    assert summary.saved == 1
    assert summary.skipped[0].reason.startswith("erro banco")


def test_no_regional_when_nothing_saved():
    generator = FakeGenerator(fail_markers=("SBRSP",))
    store = FakeStore()

    summary = _runner(generator, store).run([make_unit("SBRSPAA01")])

    assert summary.saved == 0
    assert not summary.regional_saved
    assert store.reports == []
    assert len(generator.prompts) == 1


def test_regional_failure_recorded_not_raised():
    store = FakeStore()
    generator = FakeGenerator(regional_error=RuntimeError("quota"))

    summary = _runner(generator, store).run([make_unit("SBRSPAA01")])

    assert summary.saved == 1
    assert not summary.regional_saved
    assert summary.regional_error == "quota"


def test_cancel_between_units_keeps_saved_reports():
    cancel = threading.Event()
    store = FakeStore()

    class CancellingGenerator(FakeGenerator):
        def generate(self, prompt):
            text = super().generate(prompt)
            cancel.set()  # operator presses Ctrl+C while the first unit runs
            return text

    units = [make_unit("SBRSPAA01"), make_unit("SBRSPAB02"), make_unit("SBRSPAC03")]
    summary = _runner(CancellingGenerator(), store, cancel_event=cancel).run(units)

    assert summary.cancelled
    assert summary.saved == 1
    assert not summary.regional_saved
    assert [r["summary"]["unit_code"] for r in store.reports] == ["SBRSPAA01"]


def test_cancel_before_start():
    cancel = threading.Event()
    cancel.set()
    generator = FakeGenerator()

    summary = _runner(generator, FakeStore(), cancel_event=cancel).run([make_unit("SBRSPAA01")])

    assert summary.cancelled
    assert summary.saved == 0
    assert generator.prompts == []


def test_cancel_during_last_unit_skips_regional():
    cancel = threading.Event()
    store = FakeStore()

    class CancellingGenerator(FakeGenerator):
        def generate(self, prompt):
            text = super().generate(prompt)
            cancel.set()
            return text

    summary = _runner(CancellingGenerator(), store, cancel_event=cancel).run([make_unit("SBRSPAA01")])

    assert summary.cancelled
    assert summary.saved == 1
    assert not summary.regional_saved
    assert len(store.reports) == 1


def test_custom_delay_and_threshold():
    sleeps = []
    units = [make_unit("SBRSPAA01", n_comments=5), make_unit("SBRSPAB02", n_comments=5)]

    summary = _runner(FakeGenerator(), FakeStore(), sleeps, min_comments=5, inter_call_delay=2.5).run(units)

    assert summary.saved == 2
    assert sleeps == [2.5]

"""Tests for session state transitions."""

from classifier.models import ClassificationResult, EvaluationMetrics, ParsedCsv, UploadedCsv
from classifier.state import SessionState

from conftest import make_results


def upload(name='data.csv'):
    table = ParsedCsv(columns=['name'], rows=[{'name': 'A'}, {'name': 'B'}])
    return UploadedCsv(name=name, size=2048, raw=b'name\nA\nB\n', table=table)


METRICS = EvaluationMetrics(accuracy=0.9, f1_macro=0.8, runtime_sec=1.5)


class TestTransitions:

    def test_initial_state(self):
        state = SessionState()

        assert not state.has_file
        assert not state.is_classified
        assert state.metrics is None

    def test_upload(self):
        state = SessionState().with_upload(upload())

        assert state.has_file
        assert state.row_count == 2
        assert state.size_kb == 2.0
        assert state.columns == ['name']

    def test_new_upload_discards_results_and_metrics(self):
        state = SessionState().with_upload(upload()).with_results(make_results(3)).with_metrics(METRICS)

        state = state.with_upload(upload('other.csv'))

        assert state.file_name == 'other.csv'
        assert state.results == []
        assert state.metrics is None

    def test_new_results_discard_metrics(self):
        state = SessionState().with_upload(upload()).with_results(make_results(3)).with_metrics(METRICS)

        state = state.with_results(make_results(2))

        assert len(state.results) == 2
        assert state.metrics is None

    def test_clear(self):
        state = SessionState().with_upload(upload()).with_results(make_results(3)).with_metrics(METRICS)

        assert state.cleared() == SessionState()

    def test_transitions_do_not_mutate(self):
        original = SessionState().with_upload(upload())

        original.with_results(make_results(1))

        assert original.results == []


class TestSessionSerialization:

    def test_round_trip(self):
        state = SessionState().with_upload(upload()).with_results(make_results(4)).with_metrics(METRICS)

        restored = SessionState.from_session(state.to_session())

        assert restored == state

    def test_raw_bytes_survive_round_trip(self):
        raw = b'name,city\r\nA,caf\xe9\r\n'
        table = ParsedCsv(columns=['name', 'city'], rows=[{'name': 'A', 'city': 'caf\xe9'}])
        state = SessionState().with_upload(UploadedCsv(name='cafe.csv', size=len(raw), raw=raw, table=table))

        restored = SessionState.from_session(state.to_session())

        assert restored.file_bytes == raw

    def test_results_with_colliding_columns_round_trip(self):
        results = [ClassificationResult(data={'text': 'hi', 'confidence': 'high'}, classification='A', confidence=0.9)]
        state = SessionState().with_upload(upload()).with_results(results)

        restored = SessionState.from_session(state.to_session())

        assert restored == state
        assert restored.result_records == [
            {'text': 'hi', 'source_confidence': 'high', 'classification': 'A', 'confidence': 0.9},
        ]

    def test_empty_session(self):
        assert SessionState.from_session(None) == SessionState()

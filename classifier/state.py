import base64
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .models import ClassificationResult, EvaluationMetrics, Row, UploadedCsv

SESSION_KEY = 'classifier_state'


@dataclass(frozen=True)
class SessionState:
    """Everything one visitor has uploaded, classified and evaluated.

    Each user action maps to exactly one transition method returning a new
    state, so related fields (results and metrics) always change together.
    """

    file_name: Optional[str] = None
    file_size: int = 0
    file_bytes: bytes = b''
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    results: List[ClassificationResult] = field(default_factory=list)
    metrics: Optional[EvaluationMetrics] = None

    @property
    def has_file(self):
        return self.file_name is not None

    @property
    def is_classified(self):
        return len(self.results) > 0

    @property
    def row_count(self):
        return len(self.rows)

    @property
    def size_kb(self):
        return round(self.file_size / 1024, 1)

    @property
    def result_records(self):
        return [r.as_record() for r in self.results]

    def with_upload(self, upload: UploadedCsv):
        return SessionState(
            file_name=upload.name,
            file_size=upload.size,
            file_bytes=upload.raw,
            columns=list(upload.table.columns),
            rows=list(upload.table.rows),
        )

    def with_results(self, results):
        return replace(self, results=list(results), metrics=None)

    def with_metrics(self, metrics: EvaluationMetrics):
        return replace(self, metrics=metrics)

    def cleared(self):
        return SessionState()

    def to_session(self):
        return {
            'file_name': self.file_name,
            'file_size': self.file_size,
            'file_bytes': base64.b64encode(self.file_bytes).decode('ascii'),
            'columns': self.columns,
            'rows': self.rows,
            'results': [r.to_payload() for r in self.results],
            'metrics': self.metrics.as_dict() if self.metrics else None,
        }

    @classmethod
    def from_session(cls, data):
        if not data:
            return cls()
        metrics = data.get('metrics')
        return cls(
            file_name=data.get('file_name'),
            file_size=data.get('file_size', 0),
            file_bytes=base64.b64decode(data.get('file_bytes', '')),
            columns=data.get('columns', []),
            rows=data.get('rows', []),
            results=[ClassificationResult.from_payload(r) for r in data.get('results', [])],
            metrics=EvaluationMetrics(**metrics) if metrics else None,
        )


def load_state(request):
    return SessionState.from_session(request.session.get(SESSION_KEY))


def save_state(request, state):
    request.session[SESSION_KEY] = state.to_session()

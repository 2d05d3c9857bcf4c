from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Dict, List, Mapping, Optional

Row = Dict[str, str]

# Keys the classification service adds on top of the source columns.
CLASSIFICATION_KEY = 'classification'
CONFIDENCE_KEY = 'confidence'
TIMESTAMP_KEY = 'timestamp'
TIMESTAMP_ALIASES = ('timestamp', 'processedAt')
SOURCE_PREFIX = 'source_'


class InvalidResponseError(ValueError):
    """A service answered 2xx with a body we cannot interpret."""


@dataclass
class ParsedCsv:
    columns: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)

    def __len__(self):
        return len(self.rows)


@dataclass
class UploadedCsv:
    name: str
    size: int
    raw: bytes
    table: ParsedCsv


@dataclass(frozen=True)
class ClassificationResult:
    data: Dict[str, Any] = field(default_factory=dict)
    classification: Optional[str] = None
    confidence: Optional[Any] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_payload(cls, payload):
        if not isinstance(payload, Mapping):
            raise InvalidResponseError(f'Result record must be an object, got {type(payload).__name__}')
        data = {}
        for key, value in payload.items():
            if key == 'data' and isinstance(value, Mapping):
                # Nested shape: {"data": {...row...}, "classification": ...}
                data.update(value)
            elif key in (CLASSIFICATION_KEY, CONFIDENCE_KEY) or key in TIMESTAMP_ALIASES:
                continue
            else:
                data[key] = value
        timestamp = next((payload[k] for k in TIMESTAMP_ALIASES if payload.get(k) is not None), None)
        return cls(
            data=data,
            classification=payload.get(CLASSIFICATION_KEY),
            confidence=payload.get(CONFIDENCE_KEY),
            timestamp=timestamp,
        )

    def as_record(self):
        """Flat record: source columns, then the service fields.

        A source column sharing a name with a service field the result
        carries is kept under ``source_<name>`` instead of being overwritten.
        """
        service = {
            CLASSIFICATION_KEY: self.classification,
            CONFIDENCE_KEY: self.confidence,
            TIMESTAMP_KEY: self.timestamp,
        }
        service = {k: v for k, v in service.items() if v is not None}
        record = {}
        for key, value in self.data.items():
            record[SOURCE_PREFIX + key if key in service else key] = value
        record.update(service)
        return record

    def to_payload(self):
        # Nested shape keeps source columns apart from the service fields.
        payload = {'data': dict(self.data)}
        payload.update({
            CLASSIFICATION_KEY: self.classification,
            CONFIDENCE_KEY: self.confidence,
            TIMESTAMP_KEY: self.timestamp,
        })
        return payload


@dataclass
class ClassificationResponse:
    results: List[ClassificationResult] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload):
        if isinstance(payload, list):
            records, metadata = payload, {}
        elif isinstance(payload, Mapping) and isinstance(payload.get('results'), list):
            records = payload['results']
            metadata = {k: v for k, v in payload.items() if k != 'results'}
        else:
            raise InvalidResponseError('Classification response has no "results" array')
        return cls(results=[ClassificationResult.from_payload(r) for r in records], metadata=metadata)


@dataclass(frozen=True)
class EvaluationMetrics:
    accuracy: float
    f1_macro: float
    runtime_sec: float

    @classmethod
    def from_payload(cls, payload):
        metrics = payload.get('metrics') if isinstance(payload, Mapping) else None
        if not isinstance(metrics, Mapping):
            raise InvalidResponseError('Evaluation response has no "metrics" object')
        values = {}
        for name in ('accuracy', 'f1_macro', 'runtime_sec'):
            value = metrics.get(name)
            if isinstance(value, bool) or not isinstance(value, Number):
                raise InvalidResponseError(f'Metric "{name}" is missing or not a number')
            values[name] = float(value)
        return cls(**values)

    def as_dict(self):
        return {'accuracy': self.accuracy, 'f1_macro': self.f1_macro, 'runtime_sec': self.runtime_sec}

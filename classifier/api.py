"""HTTP client for the remote classification service."""
import logging
from typing import Iterable, Optional

import requests
from django.conf import settings

from .models import ClassificationResponse, ClassificationResult, EvaluationMetrics, InvalidResponseError

logger = logging.getLogger(__name__)

CLASSIFY_PATH = '/classify/file'
EVALUATE_PATH = '/classify/order'


class ClassificationClient:
    """Single-shot calls to the classification service.

    Network and HTTP errors from ``requests`` are not caught here; callers
    decide what a failure means for the session.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.CLASSIFIER_API_BASE).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.CLASSIFIER_API_TIMEOUT

    def _url(self, path: str) -> str:
        return f'{self.base_url}{path}'

    def _json(self, response: requests.Response):
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise InvalidResponseError(f'Service returned non-JSON body from {response.url}') from exc

    def classify(self, file_name: str, content: bytes) -> ClassificationResponse:
        logger.info('Sending %s (%d bytes) for classification', file_name, len(content))
        response = requests.post(
            self._url(CLASSIFY_PATH),
            files={'file': (file_name, content, 'text/csv')},
            timeout=self.timeout,
        )
        result = ClassificationResponse.from_payload(self._json(response))
        logger.info('Received %d classification results', len(result.results))
        return result

    def evaluate(self, results: Iterable[ClassificationResult]) -> EvaluationMetrics:
        records = [r.as_record() for r in results]
        logger.info('Requesting evaluation for %d results', len(records))
        response = requests.post(self._url(EVALUATE_PATH), json=records, timeout=self.timeout)
        return EvaluationMetrics.from_payload(self._json(response))

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from classifier.models import ClassificationResult


def make_csv(text, name='data.csv'):
    return SimpleUploadedFile(name, text.encode('utf-8'), content_type='text/csv')


def make_results(count):
    return [
        ClassificationResult(
            data={'id': str(i + 1), 'text': f'row {i + 1}'},
            classification=f'Category {"AB"[i % 2]}',
            confidence=0.5 + (i % 5) / 10,
            timestamp='2024-01-15T10:30:00Z',
        )
        for i in range(count)
    ]


@pytest.fixture
def sample_csv():
    return make_csv('name,age\nA,10\nB,20\nC,30\n')

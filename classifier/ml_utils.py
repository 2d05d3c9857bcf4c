import time
from datetime import datetime, timezone
import numpy as np, pandas as pd
from sklearn.metrics import accuracy_score, f1_score

MOCK_CATEGORIES = ['Category A', 'Category B', 'Category C', 'Category D']
LABEL_CANDIDATES = ['source_classification', 'label', 'true_label', 'expected', 'target', 'category', 'class', 'y']


def mock_classify(rows, rng=None):
    # Stand-in for the real model: round-robin categories, confidence in [0.6, 1.0)
    rng = rng if rng is not None else np.random.default_rng()
    confidences = rng.uniform(0.6, 1.0, size=len(rows))
    processed_at = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')
    return [
        {
            'data': row,
            'classification': MOCK_CATEGORIES[i % len(MOCK_CATEGORIES)],
            'confidence': round(float(confidences[i]), 4),
            'processedAt': processed_at,
        }
        for i, row in enumerate(rows)
    ]


def detect_label_column(df):
    # Heuristic to find the ground-truth column next to the predictions
    lowered = {str(c).lower(): c for c in df.columns if c != 'classification'}
    return next((lowered[c] for c in LABEL_CANDIDATES if c in lowered), None)


def evaluate_results(records):
    t0 = time.time()
    df = pd.DataFrame(records)
    if df.empty or 'classification' not in df.columns:
        raise ValueError('No classification results to evaluate')
    label_col = detect_label_column(df)
    if label_col is None:
        raise ValueError('No ground-truth label column found in results')

    y_true = df[label_col].fillna('').astype(str).str.strip()
    y_pred = df['classification'].fillna('').astype(str).str.strip()
    acc = accuracy_score(y_true, y_pred)
    f1 = f1_score(y_true, y_pred, average='macro', zero_division=0)
    return {
        'accuracy': round(float(acc), 4),
        'f1_macro': round(float(f1), 4),
        'runtime_sec': round(time.time() - t0, 4),
    }

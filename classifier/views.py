import json, logging
import requests
from django.conf import settings
from django.contrib import messages
from django.core.cache import cache
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST
from .api import ClassificationClient
from .csv_utils import decode_upload, encode_csv, export_filename, parse_csv
from .forms import TableQueryForm, UploadForm
from .ml_utils import evaluate_results, mock_classify
from .models import InvalidResponseError
from .state import load_state, save_state
from .table import ResultsTable

logger = logging.getLogger(__name__)

CLASSIFY_LOCK_TIMEOUT = 300


def _classify_lock_key(request):
    if not request.session.session_key:
        request.session.save()
    return f'classifier:classify-lock:{request.session.session_key}'


def home(request):
    state = load_state(request)
    if request.method == 'POST':
        form = UploadForm(request.POST, request.FILES)
        if form.is_valid():
            upload = form.upload
            save_state(request, state.with_upload(upload))
            logger.info('Uploaded %s: %d rows, %d columns', upload.name, len(upload.table), len(upload.table.columns))
            messages.success(request, f'File "{upload.name}" uploaded successfully!')
        else:
            for errors in form.errors.values():
                for error in errors:
                    messages.error(request, error)
        return redirect('home')

    table = None
    if state.is_classified:
        options = TableQueryForm(request.GET).table_options()
        table = ResultsTable(state.result_records, page_size=settings.CLASSIFIER_PAGE_SIZE, **options)

    return render(request, 'classifier/home.html', {
        'form': UploadForm(),
        'state': state,
        'table': table,
    })


@require_POST
def classify(request):
    state = load_state(request)
    if not state.has_file or state.row_count == 0:
        messages.error(request, 'Please upload a CSV file first')
        return redirect('home')

    lock_key = _classify_lock_key(request)
    if not cache.add(lock_key, True, CLASSIFY_LOCK_TIMEOUT):
        messages.warning(request, 'Classification is already running for this file')
        return redirect('home')

    client = ClassificationClient()
    try:
        try:
            response = client.classify(state.file_name, state.file_bytes)
        except (requests.RequestException, InvalidResponseError):
            logger.exception('Classification of %s failed', state.file_name)
            messages.error(request, 'Classification failed. Please check your backend API.')
            return redirect('home')

        state = state.with_results(response.results)
        messages.success(request, f'Successfully classified {len(response.results)} rows')

        if state.is_classified:
            try:
                state = state.with_metrics(client.evaluate(state.results))
            except (requests.RequestException, InvalidResponseError) as exc:
                # Results stay; only the metrics view is unavailable.
                logger.warning('Evaluation of %s failed: %s', state.file_name, exc)
                messages.warning(request, 'Evaluation metrics are unavailable for these results')
        save_state(request, state)
    finally:
        cache.delete(lock_key)
    return redirect('home')


@require_GET
def export(request):
    state = load_state(request)
    if not state.is_classified:
        messages.error(request, 'No results to export')
        return redirect('home')

    filename = export_filename()
    response = HttpResponse(encode_csv(state.result_records), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    logger.info('Exported %d results as %s', len(state.results), filename)
    return response


@require_POST
def clear(request):
    save_state(request, load_state(request).cleared())
    messages.info(request, 'All data cleared')
    return redirect('home')


def _require_mock_backend():
    if not settings.CLASSIFIER_MOCK_BACKEND:
        raise Http404('Mock classification backend is disabled')


@csrf_exempt
@require_POST
def mock_classify_file(request):
    _require_mock_backend()
    f = request.FILES.get('file')
    if f is None:
        return JsonResponse({'error': 'No file provided'}, status=400)
    if not f.name.lower().endswith('.csv'):
        return JsonResponse({'error': 'File must be CSV format'}, status=400)

    table = parse_csv(decode_upload(f.read()))
    if len(table) == 0:
        return JsonResponse({'error': 'Empty CSV file'}, status=400)

    results = mock_classify(table.rows)
    return JsonResponse({'results': results, 'count': len(results)})


@csrf_exempt
@require_POST
def mock_classify_order(request):
    _require_mock_backend()
    try:
        payload = json.loads(request.body)
    except ValueError:
        return JsonResponse({'error': 'Body must be JSON'}, status=400)
    records = payload.get('results') if isinstance(payload, dict) else payload
    if not isinstance(records, list):
        return JsonResponse({'error': 'Expected a JSON array of results'}, status=400)

    try:
        metrics = evaluate_results(records)
    except ValueError as exc:
        return JsonResponse({'error': str(exc)}, status=422)
    return JsonResponse({'metrics': metrics})

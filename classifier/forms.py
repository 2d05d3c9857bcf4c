from django import forms
from django.conf import settings
from .csv_utils import decode_upload, parse_csv
from .models import UploadedCsv
from .table import ASC, DESC


class UploadForm(forms.Form):
    file = forms.FileField(
        widget=forms.FileInput(attrs={'class': 'form-control', 'accept': '.csv'}),
        error_messages={'required': 'Please choose a CSV file to upload'},
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.upload = None

    def clean_file(self):
        f = self.cleaned_data['file']
        if not f.name.lower().endswith('.csv'):
            raise forms.ValidationError('Please upload a CSV file')
        if f.size > settings.CLASSIFIER_MAX_UPLOAD_SIZE:
            limit_mb = settings.CLASSIFIER_MAX_UPLOAD_SIZE // (1024 * 1024)
            raise forms.ValidationError(f'File size must be less than {limit_mb}MB')

        raw = f.read()
        table = parse_csv(decode_upload(raw))
        if len(table) == 0:
            raise forms.ValidationError('The CSV file appears to be empty or invalid')

        self.upload = UploadedCsv(name=f.name, size=f.size, raw=raw, table=table)
        return f


class TableQueryForm(forms.Form):
    q = forms.CharField(required=False, strip=False)
    sort = forms.CharField(required=False)
    dir = forms.ChoiceField(choices=[(ASC, 'Ascending'), (DESC, 'Descending')], required=False)
    page = forms.IntegerField(required=False)

    def table_options(self):
        # Bad query parameters fall back to defaults instead of erroring the page.
        self.is_valid()
        data = getattr(self, 'cleaned_data', {})
        return {
            'search': data.get('q') or '',
            'sort_column': data.get('sort') or None,
            'sort_direction': data.get('dir') or ASC,
            'page': data.get('page') or 1,
        }

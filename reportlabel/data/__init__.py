"""Report table model, label normalization, archive loading."""
from .schemas import Period, PeriodType, ReportTable, Row, TableCollection, parse_date_param
from .store import ArchiveStore, build_request
from .normalize import sanitize_input_value, unsanitize_input_value, url_decode, encode_label_path

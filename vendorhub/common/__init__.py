# Common utilities
from .cache import TTLCache
from .config_loader import Settings, load_config, load_settings
from .csv_utils import configure_csv, csv_filename, read_csv, rows_to_csv, write_csv
from .errors import (
    Forbidden,
    LimitExceeded,
    NotFound,
    Unauthorized,
    UpstreamFailure,
    ValidationFailed,
    VendorHubError,
)
from .log_config import setup_logging
from .text_utils import first_address_segment, generate_handle, parse_string_list

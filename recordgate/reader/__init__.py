# Data Reader
# Record-level enforcement: opens a resource, applies the request's rules
# record by record, and writes only what the rules release.
#
# - Resource reader: raw stream opening with URI -> plain path fallback
# - Response writer: single-use, bypasses de/serialisation when no rule applies
# - Data reader: read(request, processed, returned) with capacity refusal

from recordgate.reader.models import (
    User,
    Context,
    LeafResource,
    DataReaderRequest,
)
from recordgate.reader.errors import (
    DataReaderError,
    NoCapacityError,
    ResourceReadError,
    ResponseAlreadyWrittenError,
)
from recordgate.reader.counters import AuditCounter, NOT_COUNTED
from recordgate.reader.resource import (
    ResourceReader,
    BackendResourceReader,
    InvalidUriError,
    parse_uri,
)
from recordgate.reader.writer import SerialisingResponseWriter
from recordgate.reader.reader import DataReader, DataReaderResponse, ReadSlots
from recordgate.reader.factory import (
    ReaderConfig,
    create_data_reader,
    create_data_reader_from_env,
    config_from_env,
)

__all__ = [
    # Models
    "User",
    "Context",
    "LeafResource",
    "DataReaderRequest",
    # Errors
    "DataReaderError",
    "NoCapacityError",
    "ResourceReadError",
    "ResponseAlreadyWrittenError",
    # Audit
    "AuditCounter",
    "NOT_COUNTED",
    # Resource reading
    "ResourceReader",
    "BackendResourceReader",
    "InvalidUriError",
    "parse_uri",
    # Writing
    "SerialisingResponseWriter",
    # Reader
    "DataReader",
    "DataReaderResponse",
    "ReadSlots",
    # Factory
    "ReaderConfig",
    "create_data_reader",
    "create_data_reader_from_env",
    "config_from_env",
]

# recordgate - Record-level enforcement for governed data access
# Opens a resource, applies the request's record rules, and writes only the
# records (or redacted records) the rules release, with audit counting.

__version__ = "0.1.0"

# Re-export commonly used components for convenience
from recordgate.reader import (
    User,
    Context,
    LeafResource,
    DataReaderRequest,
    DataReader,
    DataReaderResponse,
    AuditCounter,
    NOT_COUNTED,
    DataReaderError,
    NoCapacityError,
    ResourceReadError,
    ResponseAlreadyWrittenError,
    ReaderConfig,
    create_data_reader,
    create_data_reader_from_env,
)
from recordgate.rules import Rule, PredicateRule, TransformRule, Rules
from recordgate.serialisation import (
    DataFlavour,
    Serialiser,
    SerialiserRegistry,
    ConfigurationError,
    NoSuchSerialiserError,
)

__all__ = [
    "__version__",
    # Reader
    "User",
    "Context",
    "LeafResource",
    "DataReaderRequest",
    "DataReader",
    "DataReaderResponse",
    "AuditCounter",
    "NOT_COUNTED",
    "ReaderConfig",
    "create_data_reader",
    "create_data_reader_from_env",
    # Errors
    "DataReaderError",
    "NoCapacityError",
    "ResourceReadError",
    "ResponseAlreadyWrittenError",
    "ConfigurationError",
    "NoSuchSerialiserError",
    # Rules
    "Rule",
    "PredicateRule",
    "TransformRule",
    "Rules",
    # Serialisation
    "DataFlavour",
    "Serialiser",
    "SerialiserRegistry",
]

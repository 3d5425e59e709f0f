"""
Data Reader Exceptions

Callers discriminate failures by type:
- NoCapacityError: this reader cannot take the request now; try elsewhere
- ResourceReadError: the resource could not be opened or read
- ResponseAlreadyWrittenError: a response was written twice (caller bug)

Misconfigured data flavours raise
recordgate.serialisation.NoSuchSerialiserError instead.
"""


class DataReaderError(Exception):
    """Base exception for data reader errors."""
    pass


class NoCapacityError(DataReaderError):
    """Reader is at capacity; raised before any resource is opened."""

    def __init__(self, in_flight: int, max_in_flight: int):
        self.in_flight = in_flight
        self.max_in_flight = max_in_flight
        super().__init__(f"No capacity: {in_flight}/{max_in_flight} reads in flight")


class ResourceReadError(DataReaderError):
    """A resource could not be opened or its stream failed mid-transfer."""

    def __init__(self, resource_id: str, cause: BaseException | None = None):
        self.resource_id = resource_id
        self.cause = cause
        super().__init__(f"Unable to read resource: {resource_id}")


class ResponseAlreadyWrittenError(DataReaderError):
    """write() was called on a response that has already been written."""

    def __init__(self) -> None:
        super().__init__("response already written")

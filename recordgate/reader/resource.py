"""
Resource Reader

Opens the raw byte stream for a resource identifier.

Identifiers come from several upstream systems with inconsistent
conventions: some send fully-qualified URIs, some send bare paths. Each
identifier is therefore tried once as a URI and, only if it does not parse
as one, once more as a plain path. There are no further retries and no
backoff; retrying is the caller's concern.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import BinaryIO
from urllib.parse import SplitResult, urlsplit

from recordgate.reader.errors import ResourceReadError
from recordgate.storage import StorageBackend, StorageError

logger = logging.getLogger(__name__)

# RFC 3986 reserved + unreserved characters, plus percent-encoded octets
_URI_CHARS = re.compile(r"^(?:[A-Za-z0-9\-._~:/?#\[\]@!$&'()*+,;=]|%[0-9A-Fa-f]{2})*$")
_URI_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")


class InvalidUriError(ValueError):
    """Identifier is not a syntactically valid URI."""
    pass


def parse_uri(identifier: str) -> SplitResult:
    """
    Parse an identifier as an RFC 3986 URI reference.

    Raises:
        InvalidUriError: If the identifier contains characters a URI cannot
            hold unencoded, has a malformed scheme, or fails to split
    """
    if not _URI_CHARS.match(identifier):
        raise InvalidUriError(f"Illegal character in URI: {identifier!r}")
    try:
        uri = urlsplit(identifier)
    except ValueError as e:
        raise InvalidUriError(str(e)) from e
    if uri.scheme and not _URI_SCHEME.match(uri.scheme):
        raise InvalidUriError(f"Illegal scheme in URI: {identifier!r}")
    return uri


class ResourceReader(ABC):
    """
    Capability for opening raw resource streams.
    """

    @abstractmethod
    def open_raw(self, resource_id: str) -> BinaryIO:
        """
        Open a single-pass byte stream for a resource.

        The stream is returned unread; the caller owns closing it.

        Raises:
            ResourceReadError: If the resource cannot be opened
        """
        ...


class BackendResourceReader(ResourceReader):
    """
    Resource reader over a pluggable storage backend.
    """

    def __init__(self, backend: StorageBackend):
        self.backend = backend

    def open_raw(self, resource_id: str) -> BinaryIO:
        if not resource_id:
            raise ValueError("resource_id is required")

        try:
            # 1st attempt: process this as a URI
            stream = self.backend.open_uri(parse_uri(resource_id))
        except InvalidUriError as e:
            logger.debug(f"Issue encountered while reading resource {resource_id} as a URI: {e}")
            # 2nd attempt: process as a plain path
            try:
                stream = self.backend.open_path(resource_id)
            except (OSError, ValueError, StorageError) as ex:
                raise ResourceReadError(resource_id, ex) from ex
        except (OSError, ValueError, StorageError) as e:
            raise ResourceReadError(resource_id, e) from e

        logger.debug(f"Successfully created stream to resource {resource_id}")
        return stream

"""
Serialiser Registry

Maps data flavours to the serialisers that understand them.

Registration is a setup-time operation performed before requests arrive;
afterwards the registry is only read, so lookups take no lock. A missing
flavour is a configuration error and never falls back to a default.
"""

import logging
from collections.abc import Mapping

from recordgate.serialisation.ports import DataFlavour, Serialiser, NoSuchSerialiserError

logger = logging.getLogger(__name__)


class SerialiserRegistry:
    """
    Registry of serialisers keyed by data flavour.
    """

    def __init__(self, serialisers: Mapping[DataFlavour, Serialiser] | None = None):
        self._serialisers: dict[DataFlavour, Serialiser] = {}
        if serialisers:
            self.register_all(serialisers)

    def register(self, flavour: DataFlavour, serialiser: Serialiser) -> None:
        """
        Register a serialiser, replacing any existing one for the flavour.

        Args:
            flavour: Data flavour the serialiser handles
            serialiser: The serialiser instance
        """
        if flavour in self._serialisers:
            logger.info(f"Replacing serialiser for {flavour}")
        self._serialisers[flavour] = serialiser
        logger.info(f"Registered serialiser {type(serialiser).__name__} for {flavour}")

    def register_all(self, serialisers: Mapping[DataFlavour, Serialiser]) -> None:
        for flavour, serialiser in serialisers.items():
            self.register(flavour, serialiser)

    def resolve(self, flavour: DataFlavour) -> Serialiser:
        """
        Get the serialiser for a flavour.

        Raises:
            NoSuchSerialiserError: If nothing is registered for the flavour
        """
        serialiser = self._serialisers.get(flavour)
        if serialiser is None:
            raise NoSuchSerialiserError(flavour)
        return serialiser

    def flavours(self) -> list[DataFlavour]:
        return list(self._serialisers.keys())

    def __contains__(self, flavour: object) -> bool:
        return flavour in self._serialisers

    def __len__(self) -> int:
        return len(self._serialisers)

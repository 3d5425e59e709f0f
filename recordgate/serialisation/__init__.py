# Serialisation
# Data flavours, the serialiser contract, and the flavour -> serialiser registry

from recordgate.serialisation.ports import (
    DataFlavour,
    Serialiser,
    ConfigurationError,
    NoSuchSerialiserError,
)
from recordgate.serialisation.registry import SerialiserRegistry
from recordgate.serialisation.lines import LineSerialiser
from recordgate.serialisation.jsonlines import JsonLinesSerialiser

__all__ = [
    "DataFlavour",
    "Serialiser",
    "ConfigurationError",
    "NoSuchSerialiserError",
    "SerialiserRegistry",
    "LineSerialiser",
    "JsonLinesSerialiser",
]

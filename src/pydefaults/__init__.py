from .archive import Archivable, ArchivableSerializer, Archiver, PickleArchiver
from .codable import CodableSerializer, Codec, PydanticCodec, decodable, save_encodable
from .defaults import Defaults
from .errors import (
    ArchiveError,
    DefaultsError,
    StoreLoadError,
    StoreWriteError,
    UnsupportedValueError,
)
from .key import Key
from .serializers import (
    BOOL,
    DATA,
    DATE,
    FLOAT,
    INT,
    MISSING,
    STRING,
    URL,
    ArraySerializer,
    Serializer,
)
from .stores import FileStore, MemoryStore, NativeStore, PlistStore, YamlStore, open_store


__all__ = [
    "Archivable",
    "ArchivableSerializer",
    "Archiver",
    "ArchiveError",
    "ArraySerializer",
    "BOOL",
    "CodableSerializer",
    "Codec",
    "DATA",
    "DATE",
    "Defaults",
    "DefaultsError",
    "FLOAT",
    "FileStore",
    "INT",
    "Key",
    "MISSING",
    "MemoryStore",
    "NativeStore",
    "PickleArchiver",
    "PlistStore",
    "PydanticCodec",
    "STRING",
    "Serializer",
    "StoreLoadError",
    "StoreWriteError",
    "URL",
    "UnsupportedValueError",
    "YamlStore",
    "decodable",
    "open_store",
    "save_encodable",
]

"""Package index collaborators consumed by the resolver."""

from .http import HttpPackageIndex
from .index import InMemoryPackageIndex, PackageLookup, load_index_file
from .models import Package, VersionedRelease

__all__ = [
    "HttpPackageIndex",
    "InMemoryPackageIndex",
    "Package",
    "PackageLookup",
    "VersionedRelease",
    "load_index_file",
]

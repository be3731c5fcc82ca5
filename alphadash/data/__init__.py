from alphadash.data.provider import (
    Dataset,
    DatasetProvider,
    build_source,
    observations_from_frame,
)
from alphadash.data.sources import BlobSource, DataSource, HttpSource, LocalFileSource

__all__ = [
    "Dataset",
    "DatasetProvider",
    "build_source",
    "observations_from_frame",
    "DataSource",
    "LocalFileSource",
    "BlobSource",
    "HttpSource",
]

"""Uniform object storage over Amazon S3 and Google Cloud Storage."""

from object_storage.infra.storage import *  # noqa: F401,F403
from object_storage.infra.storage import __all__

__version__ = "0.1.0"

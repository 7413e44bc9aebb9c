from .base import BaseSink, Sample
from .local import LocalSink
from .mongo import MongoSink

__all__ = ["BaseSink", "LocalSink", "MongoSink", "Sample"]

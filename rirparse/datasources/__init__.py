from rirparse.datasources.base import ByteSource, TextSource
from rirparse.datasources.file_source import FileSource
from rirparse.datasources.http_source import RIR_URLS, HttpSource
from rirparse.datasources.resolve import resolve_source

__all__ = ["ByteSource", "TextSource", "FileSource", "HttpSource", "RIR_URLS", "resolve_source"]

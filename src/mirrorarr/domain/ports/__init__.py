from .embed import CookieBuilder, EmbedPort, ProgressSink, SourcePort, TitleComparator
from .fetcher import FetcherPort

__all__ = [
    "CookieBuilder",
    "EmbedPort",
    "FetcherPort",
    "ProgressSink",
    "SourcePort",
    "TitleComparator",
]

from .media import (
    Caption,
    EmbedRequest,
    EpisodeEntry,
    EpisodePage,
    MediaMeta,
    MediaQuery,
    MediaType,
    PlaylistEntry,
    SearchCandidate,
    SeasonRef,
    StreamDescriptor,
    StreamFlag,
)

__all__ = [
    "Caption",
    "EmbedRequest",
    "EpisodeEntry",
    "EpisodePage",
    "MediaMeta",
    "MediaQuery",
    "MediaType",
    "PlaylistEntry",
    "SearchCandidate",
    "SeasonRef",
    "StreamDescriptor",
    "StreamFlag",
]

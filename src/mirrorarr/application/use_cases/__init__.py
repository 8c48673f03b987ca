from .resolve_stream import EmbedProgressSink, ResolveStreamUseCase

__all__ = ["EmbedProgressSink", "ResolveStreamUseCase"]

from .stremio_play import StremioPlayUseCase
from .stremio_stream import StremioStreamUseCase

__all__ = ["StremioPlayUseCase", "StremioStreamUseCase"]

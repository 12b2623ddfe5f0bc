from .recording import RecordingModel

__all__ = ["RecordingModel"]

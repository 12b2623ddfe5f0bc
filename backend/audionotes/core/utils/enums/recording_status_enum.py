import enum


class RecordingStatus(str, enum.Enum):
    """Lifecycle of a recording row"""
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

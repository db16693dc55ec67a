import enum


class DeployState(str, enum.Enum):
    NEW = "new"
    PENDING_REVIEW = "pending_review"
    ACCEPTED = "accepted"
    ENQUEUED = "enqueued"
    BUILDING = "building"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    PREPARING = "preparing"
    PREPARED = "prepared"
    PROCESSING = "processing"
    PROCESSED = "processed"
    READY = "ready"
    CURRENT = "current"
    ERROR = "error"
    REJECTED = "rejected"


READY_STATES = frozenset({DeployState.READY.value, DeployState.CURRENT.value})


class Phase(str, enum.Enum):
    CONFIGURATION = "configuration"
    CREATION = "creation"
    READINESS = "readiness"
    AVAILABILITY = "availability"

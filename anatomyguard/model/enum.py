import enum


class DeploymentEnvironment(enum.Enum):
    Production = "production"
    Development = "development"
    Staging = "staging"
    Sandbox = "sandbox"
    Test = "test"
    Local = "local"


class AuditStatus(enum.Enum):
    Correct = "Correct"
    Incorrect = "Incorrect"


class ProcessingStatus(enum.Enum):
    Idle = "idle"
    Analyzing = "analyzing"
    Completed = "completed"
    Error = "error"


class MediaType(enum.Enum):
    PDF = "application/pdf"
    Word = "application/msword"
    WordOpenXML = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

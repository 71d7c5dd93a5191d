"""Domain errors raised by the registry services.

Routers translate these into HTTP errors; nothing here is fatal to the process.
"""


class ProjectNotFoundError(LookupError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} not found")
        self.project_id = project_id


class DuplicateProjectError(ValueError):
    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} already exists")
        self.project_id = project_id


class InvalidDraftError(ValueError):
    """A draft does not fit the operation it was submitted to."""


class FieldLockedError(PermissionError):
    """A field group is not editable under the project's current status."""


class LocationCaptureError(RuntimeError):
    """The host could not provide a usable location fix."""


class AdvisoryConfigError(RuntimeError):
    """The advisory client is missing a required credential."""


class AdvisoryBusyError(RuntimeError):
    def __init__(self, key: str) -> None:
        super().__init__(f"An advisory request for {key} is already in progress")
        self.key = key

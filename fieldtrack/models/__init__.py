from fieldtrack.models.component import Component
from fieldtrack.models.job import Job
from fieldtrack.models.local_storage import LocalStorageEntry
from fieldtrack.models.material_catalog import MaterialCatalogItem
from fieldtrack.models.notification import Notification
from fieldtrack.models.photo import Photo
from fieldtrack.models.time_entry import TimeEntry
from fieldtrack.models.worker import Worker

__all__ = [
    "Component",
    "Job",
    "LocalStorageEntry",
    "MaterialCatalogItem",
    "Notification",
    "Photo",
    "TimeEntry",
    "Worker",
]

"""
Mounting file-group fields on application models.

A model field that holds an Uploadcare group value is registered here
once, at import/boot time:

    registry = FileGroupRegistry(resolver, store_hook, MountOptions.from_settings(settings))
    registry.mount(Post, "photos")

After that the registry answers three questions for any record:
what group does this field hold (`group_for`), should the view render a
multiple uploader for it (`has_file_group`), and what has to happen
after the record is saved (`after_save`).

Models are plain Python objects; the raw value is read with getattr.
Wiring `after_save` into an ORM's save signal is left to the caller.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, Union

from .models import FileGroup
from .resolver import GroupResolver

logger = logging.getLogger(__name__)


class FileGroupMountError(Exception):
    """Raised when a field is used without being mounted, or misconfigured."""
    pass


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class GroupStorer(Protocol):
    """Synchronous store operation against Uploadcare."""

    def store_group(self, group_id: str) -> Any:
        ...


class JobQueue(Protocol):
    """
    Fire-and-forget task queue.

    FastAPI's BackgroundTasks satisfies this directly.
    """

    def add_task(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        ...


# ---------------------------------------------------------------------------
# Store hook
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MountOptions:
    """The two flags that decide what happens after a save."""
    do_not_store: bool = False
    store_files_async: bool = False

    @classmethod
    def from_settings(cls, settings) -> "MountOptions":
        return cls(
            do_not_store=settings.do_not_store,
            store_files_async=settings.store_files_async,
        )


class StoreGroupHook:
    """
    Stores a group upstream, inline or through a job queue.

    Sync failures propagate so the save fails loudly. Async failures
    belong to whatever runs the queue.
    """

    def __init__(
        self,
        storer: GroupStorer,
        options: MountOptions,
        async_job: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._storer = storer
        self._options = options
        self._async_job = async_job or storer.store_group

    def __call__(
        self,
        group: Optional[FileGroup],
        job_queue: Optional[JobQueue] = None,
    ) -> Any:
        if group is None or group.id is None:
            return None

        if self._options.store_files_async:
            if job_queue is None:
                raise FileGroupMountError(
                    "store_files_async is enabled but no job queue was provided"
                )
            job_queue.add_task(self._async_job, group.id)
            logger.info("Queued group store", extra={"group_id": group.id})
            return None

        logger.info("Storing group", extra={"group_id": group.id})
        return self._storer.store_group(group.id)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MountedField:
    """One registered field: how to resolve it, key it, and store it."""
    name: str
    resolver: GroupResolver
    cache_key_fn: Callable[[str], str]
    hook: Optional[StoreGroupHook] = None  # None when do_not_store was set


def model_name(model: Union[type, str]) -> str:
    """'BlogPost' -> 'blog_post'. Strings are normalized the same way."""
    name = model if isinstance(model, str) else model.__name__
    name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name)
    return name.replace("-", "_").lower()


class FileGroupRegistry:
    """
    Field name -> MountedField table, per model class.

    Lookups walk the model's MRO, so subclasses inherit their parents'
    mounted fields.
    """

    def __init__(
        self,
        resolver: GroupResolver,
        store_hook: Optional[StoreGroupHook] = None,
        options: Optional[MountOptions] = None,
        job_queue: Optional[JobQueue] = None,
    ) -> None:
        self._resolver = resolver
        self._store_hook = store_hook
        self._options = options or MountOptions()
        self._job_queue = job_queue
        self._fields: dict[type, dict[str, MountedField]] = {}
        self._models_by_name: dict[str, type] = {}

    def mount(
        self,
        model: type,
        field: str,
        resolver: Optional[GroupResolver] = None,
    ) -> MountedField:
        """
        Register `field` on `model` as a file-group field.

        The do_not_store flag is read here and only here: a field mounted
        while it was set never gets an after-save hook.
        """
        field_resolver = resolver or self._resolver
        hook = None if self._options.do_not_store else self._store_hook

        mounted = MountedField(
            name=field,
            resolver=field_resolver,
            cache_key_fn=field_resolver.cache_key,
            hook=hook,
        )
        self._fields.setdefault(model, {})[field] = mounted
        self._models_by_name[model_name(model)] = model

        logger.debug(
            "Mounted file group field",
            extra={"model": model.__name__, "field": field, "store_hook": hook is not None}
        )
        return mounted

    def mounted_fields(self, model: type) -> dict[str, MountedField]:
        """All fields mounted on model or its bases, nearest class first."""
        fields: dict[str, MountedField] = {}
        for klass in model.__mro__:
            for name, mounted in self._fields.get(klass, {}).items():
                fields.setdefault(name, mounted)
        return fields

    def has_file_group(self, model: Union[type, str, None], field: str) -> bool:
        """True if `field` is a mounted file-group field of the model."""
        if model is None:
            return False
        if isinstance(model, str):
            model = self._models_by_name.get(model_name(model))
            if model is None:
                return False
        return field in self.mounted_fields(model)

    def group_for(self, record: Any, field: str) -> Optional[FileGroup]:
        """Resolve the group stored in record.field. None when empty."""
        mounted = self._get_mounted(record, field)
        return mounted.resolver.resolve_value(getattr(record, field, None))

    def cache_key_for(self, record: Any, field: str) -> Optional[str]:
        raw = getattr(record, field, None)
        if raw is None or not str(raw).strip():
            return None
        return self._get_mounted(record, field).cache_key_fn(str(raw))

    def store(
        self,
        record: Any,
        field: str,
        job_queue: Optional[JobQueue] = None,
    ) -> Any:
        """
        Store the field's group now, whether or not the hook is mounted.

        No-op when the field holds no canonical group.
        """
        if self._store_hook is None:
            raise FileGroupMountError("No store hook configured")
        group = self.group_for(record, field)
        return self._store_hook(group, job_queue or self._job_queue)

    def after_save(
        self,
        record: Any,
        job_queue: Optional[JobQueue] = None,
    ) -> dict[str, Any]:
        """
        Run the store hook of every mounted field of the record.

        Fires on every call; saving the same group twice stores it twice.
        Returns the hook results by field name.
        """
        results: dict[str, Any] = {}
        for name, mounted in self.mounted_fields(type(record)).items():
            if mounted.hook is None:
                continue
            group = mounted.resolver.resolve_value(getattr(record, name, None))
            results[name] = mounted.hook(group, job_queue or self._job_queue)
        return results

    def _get_mounted(self, record: Any, field: str) -> MountedField:
        mounted = self.mounted_fields(type(record)).get(field)
        if mounted is None:
            raise FileGroupMountError(
                f"{type(record).__name__}.{field} is not a mounted file group field"
            )
        return mounted

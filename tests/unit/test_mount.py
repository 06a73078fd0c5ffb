"""
Unit tests for the mount registry and the after-save store hook.
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from uploadcare_web.core.groups.mount import (
    FileGroupMountError,
    FileGroupRegistry,
    MountOptions,
    StoreGroupHook,
    model_name,
)
from uploadcare_web.core.groups.resolver import GroupResolver, build_cache_key


GROUP_ID = "2254146d-3652-4419-abf6-305d36ef30a8~2"


@dataclass
class Post:
    title: str = ""
    photos: Optional[str] = None


@dataclass
class FeaturedPost(Post):
    banner: Optional[str] = None


class RecordingStorer:
    def __init__(self, error=None):
        self.stored = []
        self._error = error

    def store_group(self, group_id):
        if self._error:
            raise self._error
        self.stored.append(group_id)
        return {"id": group_id}


class RecordingQueue:
    """Stands in for FastAPI's BackgroundTasks."""

    def __init__(self):
        self.tasks = []

    def add_task(self, func, *args, **kwargs):
        self.tasks.append((func, args, kwargs))


def make_registry(storer=None, **options):
    storer = storer or RecordingStorer()
    mount_options = MountOptions(**options)
    hook = StoreGroupHook(storer, mount_options)
    return FileGroupRegistry(GroupResolver(), store_hook=hook, options=mount_options), storer


# ---------------------------------------------------------------------------
# Mounting and lookup
# ---------------------------------------------------------------------------

class TestMounting:

    def test_group_for_resolves_field(self):
        registry, _ = make_registry()
        registry.mount(Post, "photos")

        group = registry.group_for(Post(photos=GROUP_ID), "photos")

        assert group.id == GROUP_ID
        assert group.files_count == 2

    def test_group_for_tolerates_serialized_cache_entry(self):
        class StringCache:
            def read(self, key):
                return '{"files_count": 9}'

        registry = FileGroupRegistry(GroupResolver(cache=StringCache()))
        registry.mount(Post, "photos")

        group = registry.group_for(Post(photos=GROUP_ID), "photos")

        assert group.id == GROUP_ID
        assert group.files_count == 2

    def test_empty_field_resolves_to_none(self):
        registry, _ = make_registry()
        registry.mount(Post, "photos")

        assert registry.group_for(Post(), "photos") is None
        assert registry.group_for(Post(photos=" "), "photos") is None

    def test_unmounted_field_raises(self):
        registry, _ = make_registry()

        with pytest.raises(FileGroupMountError, match="Post.title"):
            registry.group_for(Post(), "title")

    def test_subclasses_inherit_mounted_fields(self):
        registry, _ = make_registry()
        registry.mount(Post, "photos")
        registry.mount(FeaturedPost, "banner")

        assert set(registry.mounted_fields(FeaturedPost)) == {"photos", "banner"}
        assert set(registry.mounted_fields(Post)) == {"photos"}

    def test_has_file_group_by_class_and_name(self):
        registry, _ = make_registry()
        registry.mount(FeaturedPost, "photos")

        assert registry.has_file_group(FeaturedPost, "photos")
        assert registry.has_file_group("featured_post", "photos")
        assert registry.has_file_group("FeaturedPost", "photos")
        assert not registry.has_file_group("featured_post", "title")
        assert not registry.has_file_group("comment", "photos")
        assert not registry.has_file_group(None, "photos")

    def test_cache_key_for_uses_resolver_key(self):
        registry, _ = make_registry()
        registry.mount(Post, "photos")

        assert registry.cache_key_for(Post(photos=GROUP_ID), "photos") == build_cache_key(GROUP_ID)
        assert registry.cache_key_for(Post(), "photos") is None

    def test_model_name(self):
        assert model_name(Post) == "post"
        assert model_name("BlogPost") == "blog_post"
        assert model_name("blog-post") == "blog_post"


# ---------------------------------------------------------------------------
# After-save hook
# ---------------------------------------------------------------------------

class TestAfterSave:

    def test_sync_store(self):
        registry, storer = make_registry()
        registry.mount(Post, "photos")

        registry.after_save(Post(photos=GROUP_ID))

        assert storer.stored == [GROUP_ID]

    def test_no_id_is_a_noop(self):
        registry, storer = make_registry()
        registry.mount(Post, "photos")

        registry.after_save(Post(photos="https://x/a.png,https://x/b.png"))
        registry.after_save(Post(photos=None))

        assert storer.stored == []

    def test_every_save_stores_again(self):
        registry, storer = make_registry()
        registry.mount(Post, "photos")
        post = Post(photos=GROUP_ID)

        registry.after_save(post)
        registry.after_save(post)

        assert storer.stored == [GROUP_ID, GROUP_ID]

    def test_async_store_enqueues(self):
        registry, storer = make_registry(store_files_async=True)
        registry.mount(Post, "photos")
        queue = RecordingQueue()

        registry.after_save(Post(photos=GROUP_ID), job_queue=queue)

        assert storer.stored == []
        assert len(queue.tasks) == 1
        func, args, _ = queue.tasks[0]
        assert args == (GROUP_ID,)
        func(*args)
        assert storer.stored == [GROUP_ID]

    def test_async_store_without_queue_raises(self):
        registry, _ = make_registry(store_files_async=True)
        registry.mount(Post, "photos")

        with pytest.raises(FileGroupMountError, match="job queue"):
            registry.after_save(Post(photos=GROUP_ID))

    def test_registry_default_queue_is_used(self):
        storer = RecordingStorer()
        options = MountOptions(store_files_async=True)
        queue = RecordingQueue()
        registry = FileGroupRegistry(
            GroupResolver(),
            store_hook=StoreGroupHook(storer, options),
            options=options,
            job_queue=queue,
        )
        registry.mount(Post, "photos")

        registry.after_save(Post(photos=GROUP_ID))

        assert len(queue.tasks) == 1

    def test_sync_store_errors_propagate(self):
        registry, _ = make_registry(storer=RecordingStorer(error=RuntimeError("boom")))
        registry.mount(Post, "photos")

        with pytest.raises(RuntimeError, match="boom"):
            registry.after_save(Post(photos=GROUP_ID))

    def test_do_not_store_never_registers_hook(self):
        registry, storer = make_registry(do_not_store=True)
        mounted = registry.mount(Post, "photos")

        for _ in range(3):
            registry.after_save(Post(photos=GROUP_ID))

        assert mounted.hook is None
        assert storer.stored == []

    def test_explicit_store_ignores_do_not_store(self):
        registry, storer = make_registry(do_not_store=True)
        registry.mount(Post, "photos")

        registry.store(Post(photos=GROUP_ID), "photos")

        assert storer.stored == [GROUP_ID]

    def test_store_without_hook_raises(self):
        registry = FileGroupRegistry(GroupResolver())
        registry.mount(Post, "photos")

        with pytest.raises(FileGroupMountError):
            registry.store(Post(photos=GROUP_ID), "photos")

    def test_after_save_returns_results_by_field(self):
        registry, _ = make_registry()
        registry.mount(FeaturedPost, "photos")
        registry.mount(FeaturedPost, "banner")

        results = registry.after_save(FeaturedPost(photos=GROUP_ID, banner="https://x/a.png"))

        assert results == {"photos": {"id": GROUP_ID}, "banner": None}

"""
Unit tests for uploader markup.

Assertions are on substrings of the rendered HTML, the way a browser
test would look for elements and attributes.
"""

from dataclasses import dataclass
from typing import Optional

import pytest

from uploadcare_web.config.settings import Settings
from uploadcare_web.core.groups.mount import FileGroupRegistry
from uploadcare_web.core.groups.resolver import GroupResolver
from uploadcare_web.views.include_tags import include_tag
from uploadcare_web.views.uploader_tags import UploaderTags, parameterize, underscore


@dataclass
class Post:
    title: Optional[str] = None
    photos: Optional[str] = None


@pytest.fixture
def settings():
    return Settings(public_key="test_public_key", _env_file=None)


@pytest.fixture
def registry():
    registry = FileGroupRegistry(GroupResolver())
    registry.mount(Post, "photos")
    return registry


@pytest.fixture
def tags(settings, registry):
    return UploaderTags(settings, registry)


# ---------------------------------------------------------------------------
# field
# ---------------------------------------------------------------------------

class TestUploaderField:

    def test_generates_uc_config(self, tags):
        html = tags.field("post", "title")

        assert "<uc-config" in html
        assert 'ctx-name="post-title"' in html
        assert 'pubkey="test_public_key"' in html

    def test_generates_regular_uploader(self, tags):
        html = tags.field("post", "title")

        assert "<uc-file-uploader-regular" in html
        assert 'class="uploadcare-uploader"' in html

    def test_generates_ctx_provider(self, tags):
        assert '<uc-upload-ctx-provider ctx-name="post-title">' in tags.field("post", "title")

    def test_includes_hidden_field(self, tags):
        html = tags.field("post", "title")

        assert 'type="hidden"' in html
        assert 'name="post[title]"' in html
        assert 'id="post_title"' in html

    def test_single_by_default(self, tags):
        html = tags.field("post", "title")

        assert 'multiple="false"' in html
        assert 'multiple="true"' not in html
        assert 'multiple="multiple"' not in html

    def test_mounted_group_field_is_multiple(self, tags):
        html = tags.field("post", "photos")

        assert 'multiple="true"' in html
        assert "const isMultiple = true;" in html

    def test_mounted_group_field_is_multiple_for_record(self, tags):
        assert 'multiple="true"' in tags.field("post", "photos", record=Post())

    def test_supports_modes(self, tags):
        html = tags.field("post", "title", mode="minimal")

        assert "<uc-file-uploader-minimal" in html
        assert "<uc-file-uploader-regular" not in html

    def test_rejects_unknown_mode(self, tags):
        with pytest.raises(ValueError, match="Unknown uploader mode"):
            tags.field("post", "title", mode="giant")

    def test_passes_config_options(self, tags):
        assert 'locale="en"' in tags.field("post", "title", config={"locale": "en"})

    def test_ignores_invalid_multiple_option(self, tags):
        html = tags.field("post", "title", config={"multiple": "multiple"})

        assert 'multiple="false"' in html
        assert 'multiple="multiple"' not in html

    def test_prepopulates_from_record(self, tags):
        post = Post(photos="https://ucarecdn.com/a/,https://ucarecdn.com/b/")

        html = tags.field("post", "photos", record=post)

        assert 'data-initial-value="https://ucarecdn.com/a/,https://ucarecdn.com/b/"' in html
        assert 'value="https://ucarecdn.com/a/,https://ucarecdn.com/b/"' in html

    def test_no_initial_value_without_record_value(self, tags):
        assert "data-initial-value" not in tags.field("post", "photos", record=Post())

    def test_includes_sync_script(self, tags):
        html = tags.field("post", "title")

        assert "<script>" in html
        assert "customElements.whenDefined" in html
        assert '"uc-file-uploader-regular"' in html
        assert '"post_title"' in html

    def test_includes_file_count_indicator(self, tags):
        html = tags.field("post", "title")

        assert 'id="post-title-file-count"' in html
        assert 'class="uploadcare-file-count"' in html

    def test_escapes_attribute_values(self, tags):
        html = tags.field("post", "photos", record=Post(photos='https://x/"><script>'))

        assert 'https://x/">' not in html
        assert 'value="https://x/&quot;&gt;&lt;script&gt;"' in html


# ---------------------------------------------------------------------------
# config attributes
# ---------------------------------------------------------------------------

class TestConfigAttributes:

    def test_keys_are_dasherized(self, tags):
        attrs = tags.config_attributes({"sourceList": "local, url", "max_local_file_size_bytes": 1000}, False)

        assert attrs["source-list"] == "local, url"
        assert attrs["max-local-file-size-bytes"] == "1000"

    def test_booleans_become_strings(self, tags):
        attrs = tags.config_attributes({"confirm_upload": True, "use_cloud_image_editor": False}, False)

        assert attrs["confirm-upload"] == "true"
        assert attrs["use-cloud-image-editor"] == "false"

    def test_multiple_is_always_last(self, tags):
        attrs = tags.config_attributes({"multiple": True, "img_only": True}, True)

        assert list(attrs)[-1] == "multiple"
        assert attrs["multiple"] == "true"

    def test_locale_from_settings(self, registry):
        tags = UploaderTags(Settings(locale="de", _env_file=None), registry)
        assert tags.config_attributes({}, False)["locale"] == "de"

    def test_option_locale_beats_settings(self, registry):
        tags = UploaderTags(Settings(locale="de", _env_file=None), registry)
        assert tags.config_attributes({"locale": "fr"}, False)["locale"] == "fr"

    def test_img_only_from_settings(self, registry):
        tags = UploaderTags(Settings(img_only=True, _env_file=None), registry)
        assert tags.config_attributes({}, False)["img-only"] == "true"

    def test_img_only_option_beats_settings(self, registry):
        tags = UploaderTags(Settings(img_only=True, _env_file=None), registry)
        assert tags.config_attributes({"imgOnly": False}, False)["img-only"] == "false"

    def test_none_values_are_dropped(self, tags):
        assert "source-list" not in tags.config_attributes({"source_list": None}, False)


# ---------------------------------------------------------------------------
# field_tag
# ---------------------------------------------------------------------------

class TestUploaderFieldTag:

    def test_ctx_name_is_parameterized(self, tags):
        html = tags.field_tag("post[photos]")

        assert 'ctx-name="post-photos"' in html
        assert 'name="post[photos]"' in html
        assert 'id="post-photos"' in html

    def test_multiple_flag(self, tags):
        assert 'multiple="true"' in tags.field_tag("photos", multiple=True)
        assert 'multiple="false"' in tags.field_tag("photos")

    def test_value_prepopulates(self, tags):
        html = tags.field_tag("photo", value="https://ucarecdn.com/a/")

        assert 'data-initial-value="https://ucarecdn.com/a/"' in html
        assert 'value="https://ucarecdn.com/a/"' in html

    def test_works_without_registry(self, settings):
        html = UploaderTags(settings).field("post", "photos")
        assert 'multiple="false"' in html


# ---------------------------------------------------------------------------
# include tag and helpers
# ---------------------------------------------------------------------------

class TestIncludeTag:

    def test_default(self):
        html = include_tag()

        assert (
            'href="https://cdn.jsdelivr.net/npm/@uploadcare/file-uploader@v1/web/uc-file-uploader-regular.min.css"'
            in html
        )
        assert '<script type="module">' in html
        assert 'import * as UC from "https://cdn.jsdelivr.net/npm/@uploadcare/file-uploader@v1/web/file-uploader.min.js";' in html
        assert "UC.defineComponents(UC);" in html

    def test_unminified_and_several_modes(self):
        html = include_tag(version="1.2.0", minified=False, modes=["regular", "inline"])

        assert "file-uploader@1.2.0/web/uc-file-uploader-regular.css" in html
        assert "file-uploader@1.2.0/web/uc-file-uploader-inline.css" in html
        assert "file-uploader@1.2.0/web/file-uploader.js" in html
        assert ".min." not in html

    def test_uploader_tags_use_configured_version(self, registry):
        tags = UploaderTags(Settings(uploader_version="v2", _env_file=None), registry)
        assert "file-uploader@v2/web/file-uploader.min.js" in tags.include()


class TestNameHelpers:

    @pytest.mark.parametrize("key,expected", [
        ("imgOnly", "img_only"),
        ("img-only", "img_only"),
        ("img_only", "img_only"),
        ("sourceList", "source_list"),
    ])
    def test_underscore(self, key, expected):
        assert underscore(key) == expected

    def test_parameterize(self):
        assert parameterize("post[photos]") == "post-photos"
        assert parameterize("My Photos") == "my-photos"

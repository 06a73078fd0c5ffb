"""
HTML for embedding the Uploadcare File Uploader in a form.

Each uploader is rendered as a group of Web Components sharing one
context name, plus a hidden input that carries the result on submit:

    tags = UploaderTags(settings, registry)
    tags.field("post", "picture")
    => <uc-config ctx-name="post-picture" pubkey="demopublickey" multiple="false"></uc-config>
       <uc-upload-ctx-provider ctx-name="post-picture"></uc-upload-ctx-provider>
       <uc-file-uploader-regular ctx-name="post-picture" class="uploadcare-uploader"></uc-file-uploader-regular>
       <span id="post-picture-file-count" class="uploadcare-file-count" ...></span>
       <input type="hidden" name="post[picture]" id="post_picture">
       <script>...</script>

Fields mounted as file groups render in multiple mode.
"""

import re
from html import escape
from typing import Any, Mapping, Optional

from ..config.settings import Settings
from ..core.groups.mount import FileGroupRegistry
from .include_tags import UPLOADER_MODES, include_tag
from .sync_script import render_sync_script


FILE_COUNT_STYLE = "cursor: pointer; color: #157cfc; text-decoration: underline; display: none;"

# Attributes handled explicitly; never copied from caller options
RESERVED_CONFIG_KEYS = ("locale", "multiple")


def underscore(key: Any) -> str:
    """'imgOnly' / 'img-only' / 'img_only' -> 'img_only'"""
    name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", str(key))
    return name.replace("-", "_").lower()


def dasherize(key: str) -> str:
    return key.replace("_", "-")


def parameterize(value: Any) -> str:
    """'post[photos]' -> 'post-photos'"""
    return re.sub(r"[^a-z0-9_]+", "-", str(value).lower()).strip("-")


def attr_value(value: Any) -> str:
    if value is True:
        return "true"
    if value is False:
        return "false"
    return str(value)


def render_attrs(attrs: Mapping[str, str]) -> str:
    return " ".join(f'{name}="{escape(value)}"' for name, value in attrs.items())


def element(name: str, attrs: Mapping[str, str], content: str = "") -> str:
    return f"<{name} {render_attrs(attrs)}>{content}</{name}>"


class UploaderTags:
    """
    Renders uploader markup using explicit settings.

    The registry is optional; without it every uploader is single-file
    unless `multiple=True` is passed to `field_tag`.
    """

    def __init__(self, settings: Settings, registry: Optional[FileGroupRegistry] = None) -> None:
        self._settings = settings
        self._registry = registry

    def include(self, minified: bool = True, modes=("regular",)) -> str:
        return include_tag(self._settings.uploader_version, minified, modes)

    def field(
        self,
        object_name: str,
        method_name: str,
        record: Any = None,
        mode: str = "regular",
        config: Optional[Mapping[str, Any]] = None,
    ) -> str:
        """
        Uploader bound to a model attribute.

        The hidden input is named "<object>[<method>]" and pre-filled
        from the record's stored value, if any.
        """
        ctx_name = f"{object_name}-{method_name}"
        input_id = f"{object_name}_{method_name}"
        is_multiple = self._is_multiple(object_name, method_name, record)
        current_value = self._current_value(record, method_name)

        hidden_attrs = {"type": "hidden", "name": f"{object_name}[{method_name}]", "id": input_id}
        if current_value:
            hidden_attrs["value"] = current_value

        return self._render(
            ctx_name=ctx_name,
            input_id=input_id,
            hidden_input=f"<input {render_attrs(hidden_attrs)}>",
            mode=mode,
            config=config or {},
            is_multiple=is_multiple,
            initial_value=current_value,
        )

    def field_tag(
        self,
        name: str,
        value: Optional[str] = None,
        mode: str = "regular",
        config: Optional[Mapping[str, Any]] = None,
        multiple: bool = False,
    ) -> str:
        """Uploader for a plain form field, not backed by a record."""
        ctx_name = parameterize(name)

        hidden_attrs = {"type": "hidden", "name": str(name), "id": ctx_name}
        if value:
            hidden_attrs["value"] = value

        return self._render(
            ctx_name=ctx_name,
            input_id=ctx_name,
            hidden_input=f"<input {render_attrs(hidden_attrs)}>",
            mode=mode,
            config=config or {},
            is_multiple=bool(multiple),
            initial_value=value or None,
        )

    def config_attributes(self, config: Mapping[str, Any], is_multiple: bool) -> dict[str, str]:
        """
        Attributes for uc-config beyond ctx-name and pubkey.

        Option keys may be given in any case style. `multiple` always
        comes last and always reflects `is_multiple`.
        """
        options = {underscore(key): value for key, value in config.items()}
        attrs: dict[str, str] = {}

        locale = options.get("locale") or self._settings.locale
        if locale:
            attrs["locale"] = attr_value(locale)

        for key, value in options.items():
            if key in RESERVED_CONFIG_KEYS or value is None:
                continue
            attr_name = dasherize(key)
            # Values like multiple="multiple" are HTML boolean leftovers
            if str(value) == key or attr_name in attrs:
                continue
            attrs[attr_name] = attr_value(value)

        if self._settings.img_only and "img-only" not in attrs:
            attrs["img-only"] = "true"

        attrs["multiple"] = "true" if is_multiple else "false"
        return attrs

    def _render(
        self,
        ctx_name: str,
        input_id: str,
        hidden_input: str,
        mode: str,
        config: Mapping[str, Any],
        is_multiple: bool,
        initial_value: Optional[str],
    ) -> str:
        if mode not in UPLOADER_MODES:
            raise ValueError(f"Unknown uploader mode: {mode!r}")

        uploader_component = f"uc-file-uploader-{mode}"
        file_count_id = f"{ctx_name}-file-count"

        config_attrs = {"ctx-name": ctx_name, "pubkey": self._settings.public_key}
        config_attrs.update(self.config_attributes(config, is_multiple))

        uploader_attrs = {"ctx-name": ctx_name, "class": "uploadcare-uploader"}
        if initial_value:
            uploader_attrs["data-initial-value"] = initial_value

        file_count_attrs = {
            "id": file_count_id,
            "class": "uploadcare-file-count",
            "style": FILE_COUNT_STYLE,
            "title": "Click to manage files",
        }

        script = render_sync_script(
            ctx_name=ctx_name,
            input_id=input_id,
            uploader_component=uploader_component,
            file_count_id=file_count_id,
            is_multiple=is_multiple,
        )

        return "".join([
            element("uc-config", config_attrs),
            element("uc-upload-ctx-provider", {"ctx-name": ctx_name}),
            element(uploader_component, uploader_attrs),
            element("span", file_count_attrs),
            hidden_input,
            f"<script>\n{script}</script>",
        ])

    def _is_multiple(self, object_name: str, method_name: str, record: Any) -> bool:
        if self._registry is None:
            return False
        model = type(record) if record is not None else object_name
        return self._registry.has_file_group(model, method_name)

    def _current_value(self, record: Any, method_name: str) -> Optional[str]:
        if record is None:
            return None
        raw = getattr(record, method_name, None)
        if raw is None:
            return None
        return str(raw).strip() or None

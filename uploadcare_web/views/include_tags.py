"""
Tags that load the File Uploader bundle from the CDN.

Example:

    include_tag()
    => <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/@uploadcare/file-uploader@v1/web/uc-file-uploader-regular.min.css">
       <script type="module">
         import * as UC from "https://cdn.jsdelivr.net/npm/@uploadcare/file-uploader@v1/web/file-uploader.min.js";
         UC.defineComponents(UC);
       </script>
"""

from html import escape
from typing import Iterable

CDN_BASE_URL = "https://cdn.jsdelivr.net/npm/@uploadcare/file-uploader"

UPLOADER_MODES = ("regular", "minimal", "inline")


def bundle_url(version: str = "v1", minified: bool = True) -> str:
    suffix = ".min" if minified else ""
    return f"{CDN_BASE_URL}@{version}/web/file-uploader{suffix}.js"


def stylesheet_url(mode: str, version: str = "v1", minified: bool = True) -> str:
    suffix = ".min" if minified else ""
    return f"{CDN_BASE_URL}@{version}/web/uc-file-uploader-{mode}{suffix}.css"


def include_tag(
    version: str = "v1",
    minified: bool = True,
    modes: Iterable[str] = ("regular",),
) -> str:
    """
    Render stylesheet links for each uploader mode plus the module
    script that defines the Web Components.
    """
    links = "".join(
        f'<link rel="stylesheet" href="{escape(stylesheet_url(mode, version, minified))}">'
        for mode in modes
    )
    script = (
        '<script type="module">\n'
        f'  import * as UC from "{escape(bundle_url(version, minified))}";\n'
        "  UC.defineComponents(UC);\n"
        "</script>"
    )
    return links + script

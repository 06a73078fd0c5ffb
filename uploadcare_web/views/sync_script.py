"""
Browser-side glue between the File Uploader and a hidden form field.

The script waits for the Web Components to be defined, pre-populates
the uploader from the field's current value, and rewrites the hidden
input whenever the upload collection changes. In multiple mode the
input holds comma-separated CDN URLs, otherwise a single CDN URL.
"""

import json

SYNC_SCRIPT_TEMPLATE = """(function() {
  // Wait for Web Components to be defined before initializing
  Promise.all([
    customElements.whenDefined('uc-config'),
    customElements.whenDefined('uc-upload-ctx-provider'),
    customElements.whenDefined(__UPLOADER_COMPONENT__)
  ]).then(() => {
    setTimeout(() => {
      initUploader();
    }, 100);
  }).catch(err => {
    console.error('Error waiting for Uploadcare components:', err);
  });

  function initUploader() {
    const ctxName = __CTX_NAME__;
    const ctxProvider = document.querySelector('uc-upload-ctx-provider[ctx-name="' + ctxName + '"]');
    const input = document.getElementById(__INPUT_ID__);
    const uploaderElement = document.querySelector(__UPLOADER_COMPONENT__ + '[ctx-name="' + ctxName + '"]');
    const fileCountElement = document.getElementById(__FILE_COUNT_ID__);
    const isMultiple = __IS_MULTIPLE__;

    if (!ctxProvider || !input) {
      console.error('Uploadcare: ctxProvider or input not found');
      return;
    }

    function getApi() {
      return ctxProvider.getAPI ? ctxProvider.getAPI() : ctxProvider;
    }

    function updateFileCount(count) {
      if (!fileCountElement) return;

      if (count > 0) {
        const label = count === 1 ? 'image' : 'files';
        fileCountElement.textContent = `${count} ${label}`;
        fileCountElement.style.display = 'inline';
      } else {
        fileCountElement.style.display = 'none';
      }
    }

    if (fileCountElement) {
      fileCountElement.addEventListener('click', () => {
        const api = getApi();
        if (api.initFlow) {
          api.initFlow();
        }
      });
    }

    function updateHiddenInput() {
      const api = getApi();
      const state = api.getOutputCollectionState ? api.getOutputCollectionState() : null;
      if (!state) return;

      const successFiles = state.successEntries || [];
      updateFileCount(successFiles.length);

      // Keep the current value while files are still uploading
      if (successFiles.length === 0 && state.uploadingCount === 0) {
        input.value = '';
      } else if (successFiles.length > 0) {
        if (isMultiple) {
          input.value = successFiles.map(f => f.cdnUrl).join(',');
        } else {
          input.value = successFiles[0].cdnUrl;
        }
      }
    }

    function addFile(api, url) {
      try {
        if (api.addFileFromCdnUrl) {
          api.addFileFromCdnUrl(url);
        } else {
          console.error('addFileFromCdnUrl not available');
        }
      } catch (err) {
        console.error('Failed to add file:', url, err);
      }
    }

    const initialValue = uploaderElement && uploaderElement.dataset ? uploaderElement.dataset.initialValue : null;
    if (initialValue) {
      const api = getApi();
      if (isMultiple && initialValue.includes(',')) {
        initialValue.split(',').map(url => url.trim()).filter(url => url).forEach(url => addFile(api, url));
      } else {
        addFile(api, initialValue);
      }
    }

    ctxProvider.addEventListener('file-upload-success', updateHiddenInput);
    ctxProvider.addEventListener('file-removed', updateHiddenInput);
    ctxProvider.addEventListener('change', updateHiddenInput);
    ctxProvider.addEventListener('file-url-changed', updateHiddenInput);
    ctxProvider.addEventListener('file-upload-failed', (e) => {
      console.error('File upload failed:', e.detail);
    });
  }
})();
"""


def _js_string(value: str) -> str:
    # "</" would close the surrounding <script> element
    return json.dumps(value).replace("</", "<\\/")


def render_sync_script(
    ctx_name: str,
    input_id: str,
    uploader_component: str,
    file_count_id: str,
    is_multiple: bool,
) -> str:
    """Return the script body (without the <script> tag) for one uploader."""
    return (
        SYNC_SCRIPT_TEMPLATE
        .replace("__UPLOADER_COMPONENT__", _js_string(uploader_component))
        .replace("__CTX_NAME__", _js_string(ctx_name))
        .replace("__INPUT_ID__", _js_string(input_id))
        .replace("__FILE_COUNT_ID__", _js_string(file_count_id))
        .replace("__IS_MULTIPLE__", "true" if is_multiple else "false")
    )

"""Adapter for bundle types: one directory per component."""

from __future__ import annotations

from .mixed_content import MixedContentSourceAdapter


class BundleSourceAdapter(MixedContentSourceAdapter):
    """Every file of the component sits in a directory named after it.

    Example::

        aura/
        └── myComponent/
            ├── myComponent.cmp
            ├── myComponent.cmp-meta.xml
            └── myComponentController.js
    """

    own_folder = True

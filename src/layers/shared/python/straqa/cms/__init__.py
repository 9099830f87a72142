"""CMS-side configuration."""

from straqa.cms.plugins import PLUGINS, get_plugin

__all__ = ["PLUGINS", "get_plugin"]

"""
AdLauncher - Bulk ad creation against a cloned Meta ad-set template.

Groups creative files by filename prefix, duplicates a template ad set, and
creates one paused ad per group through the Meta Graph API.
"""

__version__ = "0.1.0"
__author__ = "AdLauncher Team"

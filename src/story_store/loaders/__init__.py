"""
@file_name: __init__.py
@description: Import functions for CSF files
"""

from .module_importer import ModuleImporter, module_exports

__all__ = [
    "ModuleImporter",
    "module_exports",
]

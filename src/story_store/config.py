"""
@file_name: config.py
@description: Constants shared by the store and the CSF transforms
"""


# ==================== Tags ====================

# Every prepared story starts with these tags; "!dev" / "!test" remove them
DEFAULT_TAGS = ("dev", "test")


# ==================== Legacy export ====================

# Parameters kept by get_stories_json_data() (v3 stories.json shape)
V3_ALLOWED_PARAMETERS = (
    "file_name",
    "docs_only",
    "framework",
    "__id",
    "__is_args_story",
)

# Annotation keys on PreparedStory that never appear in extract() snapshots
EXTRACT_EXCLUDED_FIELDS = frozenset({"module_export", "decorators", "loaders"})

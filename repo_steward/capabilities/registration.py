"""
Capability registration for the reference file capabilities.

Single entry point that binds the file capabilities to a working directory
and registers them in a catalog. Called when an agent builds its catalog for
a task, not at import time.
"""

from functools import partial
from typing import Any, Dict, Optional

from repo_steward._logging import get_component_logger
from repo_steward.capabilities.catalog import (
    AccessLevel,
    CapabilityCatalog,
    CapabilityCategory,
)
from repo_steward.thresholds import SEARCH_CODE_DEFAULT_MAX_RESULTS


def register_file_capabilities(
    catalog: CapabilityCatalog,
    working_dir: str,
    logger: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Register read_file, write_file, file_exists, list_files and search_code.

    Args:
        catalog: Catalog to register into
        working_dir: Repository root the capabilities are bound to
        logger: Optional logger instance

    Returns:
        Dict with registration results:
        - count: Number of capabilities registered
        - registered: List of registered capability names
    """
    _logger = get_component_logger("capability_registration", logger)

    # Deferred import keeps catalog construction free of filesystem imports
    from repo_steward.capabilities.file_capabilities import (
        file_exists,
        list_files,
        read_file,
        search_code,
        write_file,
    )

    registered = []

    catalog.register(
        name="read_file",
        execute=partial(read_file, working_dir),
        description="Read the contents of a file from the repository",
        category=CapabilityCategory.FILE,
        access=AccessLevel.READ_ONLY,
        parameters={
            "path": {
                "type": "string",
                "description": "Relative path to the file from the repository root",
                "required": True,
            },
        },
    )
    registered.append("read_file")

    catalog.register(
        name="write_file",
        execute=partial(write_file, working_dir),
        description=(
            "Write content to a file. This creates a proposed change that "
            "will be reviewed; nothing is written to disk."
        ),
        category=CapabilityCategory.FILE,
        access=AccessLevel.WRITE,
        parameters={
            "path": {
                "type": "string",
                "description": "Relative path to the file",
                "required": True,
            },
            "content": {
                "type": "string",
                "description": "Content to write to the file",
                "required": True,
            },
            "description": {
                "type": "string",
                "description": "Description of what this change does",
                "required": True,
            },
        },
    )
    registered.append("write_file")

    catalog.register(
        name="file_exists",
        execute=partial(file_exists, working_dir),
        description="Check if a file exists in the repository",
        category=CapabilityCategory.FILE,
        access=AccessLevel.READ_ONLY,
        parameters={
            "path": {
                "type": "string",
                "description": "Relative path to the file",
                "required": True,
            },
        },
    )
    registered.append("file_exists")

    catalog.register(
        name="list_files",
        execute=partial(list_files, working_dir),
        description="List files in a directory",
        category=CapabilityCategory.FILE,
        access=AccessLevel.READ_ONLY,
        parameters={
            "directory": {
                "type": "string",
                "description": "Directory to list (default: repository root)",
                "required": False,
                "default": ".",
            },
            "pattern": {
                "type": "string",
                "description": "Filename glob to match, e.g. '*.ts'",
                "required": False,
            },
        },
    )
    registered.append("list_files")

    catalog.register(
        name="search_code",
        execute=partial(search_code, working_dir),
        description="Search for a regex pattern in the codebase",
        category=CapabilityCategory.FILE,
        access=AccessLevel.READ_ONLY,
        parameters={
            "pattern": {
                "type": "string",
                "description": "Search pattern (regex supported)",
                "required": True,
            },
            "file_pattern": {
                "type": "string",
                "description": "Filename glob to filter, e.g. '*.py'",
                "required": False,
            },
            "max_results": {
                "type": "integer",
                "description": f"Maximum number of results (default: {SEARCH_CODE_DEFAULT_MAX_RESULTS})",
                "required": False,
                "default": SEARCH_CODE_DEFAULT_MAX_RESULTS,
            },
        },
    )
    registered.append("search_code")

    _logger.info(
        "file_capabilities_registered",
        catalog=catalog.catalog_id,
        count=len(registered),
        working_dir=working_dir,
    )

    return {
        "count": len(registered),
        "registered": registered,
    }

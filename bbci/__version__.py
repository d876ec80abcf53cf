"""
Version information for the BBCI utilities.
"""

# Main project version
__version__ = "1.0.0"

# Component versions
TYPE_CHECK_VERSION = "1.0.0"   # Type expression parser and checker
PROCESSING_VERSION = "1.0.0"   # proc_variance, proc_z_score, proc_select_classes


def get_version_info() -> str:
    """
    Get formatted version information string.

    Returns:
        Formatted string with version and component information
    """
    info = [
        f"BBCI utilities v{__version__}",
        "",
        "Component Versions:",
        f"  - Type checking: v{TYPE_CHECK_VERSION}",
        f"  - Processing: v{PROCESSING_VERSION}",
    ]
    return "\n".join(info)

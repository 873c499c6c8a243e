#!/usr/bin/env python3
"""gtypegen 工具注册中心."""

TOOLS = [
    # --- CLI 工具 (apps/cli) ---
    {
        "file": "descriptors.py",
        "alias": "descriptors",
        "desc": "Descriptor status table / scaffold missing descriptors",
        "usage": "gtypegen descriptors <list|scaffold> [--descriptors DIR] [--source PATH|URL]",
        "type": "CLI",
        "folder": "apps/cli/commands"
    },

    # --- 开发工具 (devtools/) ---
    {
        "file": "build_gtypes.py",
        "alias": "build",
        "desc": "Generate the GTypes declaration tree",
        "usage": "gtypegen build [--source PATH|URL] [--descriptors DIR] [--out DIR] [--strict] [--formatter builtin|prettier]",
        "type": "Dev",
        "folder": "devtools"
    },
]

DEFAULT_ALIAS = "build"


def get_tools():
    return TOOLS

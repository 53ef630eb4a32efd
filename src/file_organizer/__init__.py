"""
File Organizer - move each file of a folder into a subfolder named after it.

This package provides functionality to:
- List the files of a selected folder (non-recursive)
- Apply user renames before organizing, collecting any failures
- Create a subfolder per file stem and move the file into it
- Report ordered progress events from a background worker
- Read and write Excel rename manifests
- Generate CSV reports of each run
"""

__version__ = "0.1.0"
__author__ = "File Organizer Team"

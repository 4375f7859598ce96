"""
notebk - Source Package

A personal notebook: calendar diary, monthly ledger, savings tracker,
health checklist and free-form two-column tables, all kept in a single
local JSON document that can be exported and restored as a backup.

DESIGN PRINCIPLES:
1. One document, replaced wholesale on every edit
2. Edits are pure functions of the previous document
3. Corrupt storage never crashes the app
4. Imports are validated before they replace anything
5. Storage and transfer channels are swappable
"""

__version__ = "1.0.0"
__author__ = "notebk Team"

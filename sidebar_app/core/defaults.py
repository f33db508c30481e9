"""
Centralized Default Configuration for the Side Bar app.

These values are used as fallbacks if a setting is missing from the
database (AppSettings).
"""

DEFAULT_APP_CONFIGS = {
    # First section number reserved for side bar sections.
    'SIDE_BAR_SECTION_START': 1000,
}

# Section number used by side bar blocks before allocation was introduced.
LEGACY_SECTION_NUMBER = 1000

# Localized strings for the side bar block.
STRINGS = {
    'pluginname': 'Side Bar',
    'sidebar': 'Side Bar',
    'sectionsummary': 'This section holds the activities and resources of a Side Bar block.',
    'movehere': 'Move here',
    'movefull': "Move '{0}' to this location",
    'cancel': 'Cancel',
    'addresource': 'Add a resource...',
    'addactivity': 'Add an activity...',
    'edit': 'Edit settings',
    'delete': 'Delete',
    'move': 'Move',
    'hide': 'Hide',
    'show': 'Show',
    'groupmode': 'Group mode',
}


def get_string(identifier: str, *args) -> str:
    """Return a localized string, formatting positional placeholders."""

    value = STRINGS.get(identifier, f'[[{identifier}]]')
    if args:
        return value.format(*args)
    return value

"""
Central Signal Registry for the Side Bar block.

Uses blinker namespaces so that other modules can react to section and
activity changes without importing the side bar services.

Usage:
    # Publisher (sender)
    from sidebar_app.core.signals import section_created
    section_created.send(None, course_id=1, section_id=2, section_number=1000)

    # Subscriber (receiver) - in a module's events.py
    @section_created.connect
    def on_section_created(sender, **kwargs):
        ...
"""
from blinker import Namespace

section_signals = Namespace()

# Payload: course_id, section_id, section_number
section_created = section_signals.signal('section_created')

# Payload: course_id, section_id, old_number, new_number, removed_orphans, renumbered_orphans
section_migrated = section_signals.signal('section_migrated')

# ============================================
# Block Signals
# ============================================
block_signals = Namespace()

# Payload: block_id, course_id, section_id, deleted_activities
block_deleted = block_signals.signal('block_deleted')

# Payload: activity_id, from_section_id, to_section_id, before_id
activity_moved = block_signals.signal('activity_moved')

"""Signal subscribers for the side bar module."""

from flask import current_app

from ...core.signals import activity_moved, block_deleted, section_created, section_migrated


@section_created.connect
def on_section_created(sender, **kwargs):
    current_app.logger.debug(
        "section_created course=%s section=%s number=%s",
        kwargs.get('course_id'), kwargs.get('section_id'), kwargs.get('section_number'),
    )


@section_migrated.connect
def on_section_migrated(sender, **kwargs):
    current_app.logger.debug(
        "section_migrated course=%s %s -> %s",
        kwargs.get('course_id'), kwargs.get('old_number'), kwargs.get('new_number'),
    )


@block_deleted.connect
def on_block_deleted(sender, **kwargs):
    current_app.logger.debug(
        "block_deleted block=%s section=%s activities=%s",
        kwargs.get('block_id'), kwargs.get('section_id'), kwargs.get('deleted_activities'),
    )


@activity_moved.connect
def on_activity_moved(sender, **kwargs):
    current_app.logger.debug(
        "activity_moved activity=%s %s -> %s",
        kwargs.get('activity_id'), kwargs.get('from_section_id'), kwargs.get('to_section_id'),
    )

"""Data migration: move side bar blocks off the fixed legacy section 1000."""

import sys

from sidebar_app import create_app
from sidebar_app.core.defaults import LEGACY_SECTION_NUMBER
from sidebar_app.modules.side_bar.interface import migrate_legacy_blocks


def run_migration(legacy_number=LEGACY_SECTION_NUMBER):
    app = create_app()
    with app.app_context():
        results = migrate_legacy_blocks(legacy_number)
        if not results:
            print(f'No side bar blocks use section {legacy_number}, nothing to do.')
            return

        for result in results:
            if result['section'] is None:
                print(f"Block {result['block_id']} (course {result['course_id']}): legacy section not found")
            else:
                print(f"Block {result['block_id']} (course {result['course_id']}): moved to section {result['section']}")
        print('Done!')


if __name__ == '__main__':
    run_migration(int(sys.argv[1]) if len(sys.argv) > 1 else LEGACY_SECTION_NUMBER)

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ...models import Course, User


@dataclass(frozen=True)
class AllocatorConfig:
    """Settings the section allocator works from.

    ``section_start`` is the lowest number handed out to a side bar section.
    """

    section_start: int = 1000

    @classmethod
    def from_settings(cls) -> 'AllocatorConfig':
        from ...services.config_service import get_section_start

        return cls(section_start=get_section_start())


@dataclass
class Clipboard:
    """An activity the user is currently moving."""

    activity_id: int
    name: str


@dataclass
class BlockContext:
    """Everything a block needs to know about the current request."""

    course: Course
    user: Optional[User] = None
    is_editing: bool = False
    clipboard: Optional[Clipboard] = None

    def has_capability(self, capability: str) -> bool:
        return self.user is not None and self.user.has_capability(capability)

    @property
    def can_manage(self) -> bool:
        return self.is_editing and self.has_capability('course:manageactivities')


@dataclass
class BlockContent:
    items: List[str] = field(default_factory=list)
    icons: List[str] = field(default_factory=list)
    footer: str = ''

    def add(self, item: str, icon: str = '') -> None:
        self.items.append(item)
        self.icons.append(icon)

    def to_dict(self) -> Dict[str, Any]:
        return {'items': list(self.items), 'icons': list(self.icons), 'footer': self.footer}


@dataclass
class SectionInfo:
    id: int
    section: int

    @classmethod
    def from_section(cls, section) -> 'SectionInfo':
        return cls(id=section.section_id, section=section.section)

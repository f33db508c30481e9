from . import api, editing  # noqa: F401

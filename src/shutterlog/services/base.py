"""BaseService — abstract foundation for all shutterlog services.

Every service receives a :class:`Site` at construction time. The Site
provides path resolution and the template environment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shutterlog.infrastructure.site import Site


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class BuildService(BaseService):
            def build(self) -> ServiceResult:
                env = self._site.template_env
                ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

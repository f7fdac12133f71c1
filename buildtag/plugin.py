"""Registration surface exposed to the CI host.

Descriptors describe a build step to the host: its display name, help
page, which jobs it applies to, form validation, and how to build an
instance from submitted form data.  Decorate a descriptor class with
``@extension`` to register it.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from buildtag.publisher import DEFAULT_TAG_PREFIX, GitPublisher
from buildtag.workspace import Workspace

logger = logging.getLogger(__name__)

_registry: dict[str, "Descriptor"] = {}


@dataclass
class FormValidation:
    """Result of validating one form field."""
    kind: str  # "ok" | "warning" | "error"
    message: str = ""

    @classmethod
    def ok(cls) -> "FormValidation":
        return cls("ok")

    @classmethod
    def warning(cls, message: str) -> "FormValidation":
        return cls("warning", message)

    @classmethod
    def error(cls, message: str) -> "FormValidation":
        return cls("error", message)

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"


class Descriptor:
    """Base class for build-step descriptors."""

    display_name = ""
    help_file: str | None = None

    def is_applicable(self, job_type: type) -> bool:
        return True

    def new_instance(self, form_data: dict):
        raise NotImplementedError


def extension(cls):
    """Class decorator: instantiate *cls* and register it by class name."""
    _registry[cls.__name__] = cls()
    logger.debug("Registered extension %s", cls.__name__)
    return cls


def get_descriptor(name: str) -> Descriptor:
    """Look up a registered descriptor.  Raises ``KeyError`` if unknown."""
    return _registry[name]


def all_descriptors() -> list[Descriptor]:
    return list(_registry.values())


@extension
class GitPublisherDescriptor(Descriptor):
    display_name = "Push Merges back to origin"
    help_file = "/plugin/git/gitPublisher.html"

    def check_file_mask(self, workspace: Path, value: str | None) -> FormValidation:
        """Validate a comma-separated workspace file mask.

        Empty masks and workspaces that do not exist yet are accepted.
        """
        value = (value or "").strip()
        if not value:
            return FormValidation.ok()

        ws = Workspace(workspace)
        if not ws.exists():
            return FormValidation.ok()

        warning = ""
        for mask in value.split(","):
            mask = mask.strip()
            if not mask:
                continue
            try:
                matches = ws.glob(mask)
            except (ValueError, NotImplementedError) as exc:
                return FormValidation.error(f"Invalid file mask '{mask}': {exc}")
            if matches:
                continue
            if ws.glob(mask, files_only=False):
                warning = f"'{mask}' matches only directories"
                continue
            return FormValidation.error(f"'{mask}' doesn't match anything")
        if warning:
            return FormValidation.warning(warning)
        return FormValidation.ok()

    def new_instance(self, form_data: dict) -> GitPublisher:
        prefix = (form_data or {}).get("tag_prefix") or DEFAULT_TAG_PREFIX
        return GitPublisher(tag_prefix=prefix)

"""
Toast notifications: the console's only channel for success and error feedback.
"""
import enum
import logging
from dataclasses import dataclass
from typing import List, Optional

logger = logging.getLogger(__name__)


class ToastVariant(str, enum.Enum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    title: str
    description: str
    variant: ToastVariant = ToastVariant.DEFAULT

    @property
    def is_error(self) -> bool:
        return self.variant == ToastVariant.DESTRUCTIVE


class Toaster:
    """Collects toasts in display order and mirrors them to the log."""

    def __init__(self):
        self.history: List[Toast] = []

    def notify(self, title: str, description: str, variant: ToastVariant = ToastVariant.DEFAULT) -> Toast:
        toast = Toast(title=title, description=description, variant=variant)
        self.history.append(toast)
        if toast.is_error:
            logger.warning(f"Toast [{title}]: {description}")
        else:
            logger.info(f"Toast [{title}]: {description}")
        return toast

    def success(self, description: str, title: str = "Success") -> Toast:
        return self.notify(title, description)

    def error(self, description: str, title: str = "Error") -> Toast:
        return self.notify(title, description, ToastVariant.DESTRUCTIVE)

    @property
    def last(self) -> Optional[Toast]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()

from .context import ActionContext
from .revalidation import Revalidator

__all__ = ["ActionContext", "Revalidator"]

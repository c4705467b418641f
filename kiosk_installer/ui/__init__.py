from .progress import task_status
from .prompts import AnswersPresenter, InteractivePresenter

__all__ = ["AnswersPresenter", "InteractivePresenter", "task_status"]

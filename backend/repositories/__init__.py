from .projects import ProjectsRepository
from .statements import StatementsRepository
from . import models

__all__ = ["ProjectsRepository", "StatementsRepository", "models"]

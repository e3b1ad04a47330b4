from .task import Task, UNASSIGNED_NAME
from .user import User

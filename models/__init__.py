# backend/models/__init__.py
# Re-exports the models so `import models` registers every table with SQLModel.
from .message import *

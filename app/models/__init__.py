# Iztiar Registry: Database Models
# Import all models here for SQLAlchemy discovery

from app.models.zone import Zone               # noqa
from app.models.equipment import Equipment     # noqa
from app.models.command import Command         # noqa
from app.models.counter import Counter         # noqa

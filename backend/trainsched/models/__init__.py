from trainsched.models.assignment import Draft, Schedule  # noqa: F401
from trainsched.models.establishment import Establishment  # noqa: F401
from trainsched.models.schedule_history import HistoryAction, ScheduleHistory  # noqa: F401
from trainsched.models.track import Track  # noqa: F401
from trainsched.models.trainer import Trainer  # noqa: F401

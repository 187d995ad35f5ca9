"""Domain modules package."""

from app.modules.booking import models as booking_models  # noqa: F401
from app.modules.identity import models as identity_models  # noqa: F401
from app.modules.mentors import models as mentors_models  # noqa: F401
from app.modules.scheduling import models as scheduling_models  # noqa: F401

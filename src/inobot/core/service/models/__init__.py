"""Domain models for the ask pipeline.

Re-exports every public symbol so imports like
``from inobot.core.service.models import ContextChunk`` keep working.
"""

from .constants import *  # noqa: F401, F403
from .context import *  # noqa: F401, F403
from .outcomes import *  # noqa: F401, F403
from .service import *  # noqa: F401, F403

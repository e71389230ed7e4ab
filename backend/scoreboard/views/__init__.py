from scoreboard.views.stats_handlers import (
    group_stats as group_stats,
)
from scoreboard.views.stats_handlers import (
    personal_stats as personal_stats,
)
from scoreboard.views.stats_handlers import (
    user_status as user_status,
)

"""Message text for each notification category."""

from ..config.defaults import NotificationParams
from ..state.models import NotificationCategory


class MessageFormatter:
    """Renders notification text from the configured templates."""

    def __init__(self, config: NotificationParams):
        self.templates = {
            NotificationCategory.SCHEDULED: config.schedule_template,
            NotificationCategory.LIVE: config.live_template,
            NotificationCategory.COMPLETE: config.complete_template,
        }
        self.mention = config.mention

    def format(self, category: NotificationCategory, stream_id: str, start_time: int) -> str:
        # Templates may reference any of these placeholders
        return self.templates[category].format(
            stream_id=stream_id,
            start_time=start_time,
            mention=self.mention,
        )

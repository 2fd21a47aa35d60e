# utils/broadcast.py
import logging
import random
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from utils.errors import EmptyCorpusError
from utils.formatter import format_broadcast

logger = logging.getLogger(__name__)

STARTUP_DELAY_SECONDS = 5


def parse_allowed_hours(value):
    """'7-23' -> (7, 23). Both ends are inclusive hours of the day."""
    try:
        start, end = (int(part) for part in str(value).split('-', 1))
    except ValueError:
        raise ValueError(f"Allowed hours must look like '7-23', got '{value}'")
    if not (0 <= start <= 23 and 0 <= end <= 23):
        raise ValueError(f"Allowed hours must be between 0 and 23, got '{value}'")
    return start, end


class VerseBroadcaster:
    """Pushes a random verse to every subscriber on a cron schedule.

    A cycle only submits the sends to a thread pool and returns, so slow or
    failing destinations never hold up the next cycle or each other.
    """

    def __init__(self, engine, subscribers, sender, cron_expressions, timezone='Europe/Moscow',
                 allowed_hours='7-23', endings=None, max_workers=8, send_on_startup=False, rng=None):
        self.engine = engine
        self.subscribers = subscribers
        self.sender = sender
        self.timezone = timezone
        self.zone = ZoneInfo(timezone)
        self.allowed_hours = parse_allowed_hours(allowed_hours)
        self.endings = list(endings or [])
        self.send_on_startup = send_on_startup
        self.rng = rng or random.Random()
        # from_crontab raises ValueError on a malformed expression
        self.triggers = [CronTrigger.from_crontab(expr, timezone=timezone) for expr in cron_expressions]
        self.executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix='broadcast')
        self.scheduler = None

    @classmethod
    def from_config(cls, engine, subscribers, sender, config):
        return cls(
            engine,
            subscribers,
            sender,
            config.BROADCAST_CRONS,
            timezone=config.BROADCAST_TIMEZONE,
            allowed_hours=config.BROADCAST_ALLOWED_HOURS,
            endings=config.BROADCAST_ENDINGS,
            max_workers=config.BROADCAST_WORKERS,
            send_on_startup=config.BROADCAST_ON_STARTUP,
        )

    def is_allowed_hour(self, now=None):
        now = now.astimezone(self.zone) if now else datetime.now(self.zone)
        start, end = self.allowed_hours
        if start <= end:
            return start <= now.hour <= end
        # window wraps past midnight, e.g. 22-6
        return now.hour >= start or now.hour <= end

    def build_message(self):
        verse = self.engine.random_broadcast_unit()
        ending = self.rng.choice(self.endings) if self.endings else None
        return format_broadcast(verse, ending)

    def broadcast(self, force=False, now=None):
        """Run one cycle. Returns the futures of the submitted sends."""
        if not force and not self.is_allowed_hour(now):
            logger.info("Outside allowed hours, skipping broadcast")
            return []

        destinations = self.subscribers.all()
        if not destinations:
            logger.info("No subscribers, nothing to broadcast")
            return []

        try:
            message = self.build_message()
        except EmptyCorpusError as e:
            logger.error(f"Cannot broadcast: {e}")
            return []

        logger.info(f"Broadcasting verse to {len(destinations)} destinations")
        return [self.executor.submit(self._send, destination, message) for destination in destinations]

    def _send(self, destination, message):
        try:
            self.sender.send_message(destination, message)
        except Exception as e:
            logger.error(f"Error sending verse to {destination}: {e}")
            return False
        logger.info(f"Verse sent to {destination}")
        return True

    def start(self):
        self.scheduler = BackgroundScheduler(timezone=self.timezone)
        for index, trigger in enumerate(self.triggers):
            self.scheduler.add_job(self.broadcast, trigger, id=f'broadcast-{index}', coalesce=True)
        if self.send_on_startup:
            self.scheduler.add_job(
                self.broadcast,
                'date',
                run_date=datetime.now(self.zone) + timedelta(seconds=STARTUP_DELAY_SECONDS),
                kwargs={'force': True},
                id='broadcast-startup',
            )
        self.scheduler.start()
        logger.info(f"Broadcast scheduler started with {len(self.triggers)} cron jobs")

    def shutdown(self):
        if self.scheduler is not None and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        self.executor.shutdown(wait=False)

# utils/subscribers.py
import logging

from sqlalchemy.exc import IntegrityError

from database import get_db_session
from models.subscriber import Subscriber

logger = logging.getLogger(__name__)

JOIN_STATUSES = {'member', 'administrator'}
LEAVE_STATUSES = {'left', 'kicked'}


class SubscriberStore:
    """Durable set of broadcast destinations."""

    def __init__(self, session_factory=None):
        self.session_factory = session_factory

    @staticmethod
    def _find(db, destination):
        return db.query(Subscriber).filter_by(destination=destination).first()

    def add(self, destination):
        """Returns True if the destination was not subscribed before."""
        destination = str(destination)
        try:
            with get_db_session(self.session_factory) as db:
                if self._find(db, destination) is not None:
                    return False
                db.add(Subscriber(destination=destination))
        except IntegrityError:
            # a concurrent add inserted the same destination first
            logger.info(f"Destination {destination} is already subscribed")
            return False
        logger.info(f"Subscribed destination {destination}")
        return True

    def remove(self, destination):
        """Returns True if the destination was subscribed."""
        destination = str(destination)
        with get_db_session(self.session_factory) as db:
            deleted = db.query(Subscriber).filter_by(destination=destination).delete()
        if deleted:
            logger.info(f"Unsubscribed destination {destination}")
        return bool(deleted)

    def __contains__(self, destination):
        with get_db_session(self.session_factory) as db:
            return self._find(db, str(destination)) is not None

    def all(self):
        with get_db_session(self.session_factory) as db:
            rows = db.query(Subscriber.destination).order_by(Subscriber.id).all()
        return [row.destination for row in rows]

    def apply_membership(self, destination, status):
        """Follow a chat membership change: joining subscribes, leaving unsubscribes.

        Returns True if the subscriber set changed.
        """
        if status in JOIN_STATUSES:
            return self.add(destination)
        if status in LEAVE_STATUSES:
            return self.remove(destination)
        return False

import enum
import logging
from typing import List

from sqlalchemy import inspect

from ..models import PolicyCardClick, PolicyCardClickCount

logger = logging.getLogger("handbook.bootstrap")

CLICK_TRACKING_TABLES = [PolicyCardClick.__table__, PolicyCardClickCount.__table__]


class BootstrapState(str, enum.Enum):
    NOT_CHECKED = "not_checked"
    CHECKING = "checking"
    READY = "ready"
    DEGRADED_NO_TRACKING = "degraded_no_tracking"


class SchemaBootstrap:
    """
    Makes sure the click tracking tables exist.

    Meant to run once at startup. Failures leave the bootstrap in
    DEGRADED_NO_TRACKING instead of raising, so search and export keep
    serving while click tracking fails per request.
    """

    def __init__(self, engine, tables=None):
        self.engine = engine
        self.tables = tables if tables is not None else CLICK_TRACKING_TABLES
        self.state = BootstrapState.NOT_CHECKED

    def run(self) -> List[str]:
        """Create missing tables. Returns the names of tables created."""
        self.state = BootstrapState.CHECKING
        created = []

        try:
            with self.engine.begin() as conn:
                for table in self.tables:
                    if inspect(conn).has_table(table.name):
                        continue
                    # Creates the table together with its indexes
                    table.create(bind=conn)
                    created.append(table.name)
                    logger.info("Created %s table", table.name)
        except Exception:
            logger.error("Failed to create policy click tracking tables", exc_info=True)
            self.state = BootstrapState.DEGRADED_NO_TRACKING
            # The failed transaction rolls back anything created before it
            return []

        self.state = BootstrapState.READY
        return created

    @property
    def tracking_available(self) -> bool:
        return self.state == BootstrapState.READY
